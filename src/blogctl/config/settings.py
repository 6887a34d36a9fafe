"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``BLOGCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``blogctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The TOML source is injected through :meth:`BlogSettings.settings_customise_sources`
using a thread-local so :meth:`BlogSettings.from_cli` can hand the discovered
path to Pydantic Settings without a module-level global.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from blogctl.config.discovery import find_config
from blogctl.config.models import (
    BuildConfig,
    CheckConfig,
    CompileHealthConfig,
    ScriptsConfig,
    SiteConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``blogctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


_tls = threading.local()


class BlogSettings(BaseSettings):
    """Unified settings for the blogctl CLI.

    Attributes:
        site_root: Directory holding the blog sources (parent of
            ``blogctl.toml``, or CWD if no config was found).
        config_path: The TOML file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BLOGCTL_",
        "env_nested_delimiter": "__",
    }

    site_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    site: SiteConfig = Field(default_factory=SiteConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)
    compile_health: CompileHealthConfig = Field(default_factory=CompileHealthConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        site_root: Path | None = None,
        **cli_flags: Any,
    ) -> BlogSettings:
        """Construct settings from a CLI invocation.

        Discovers ``blogctl.toml`` via walk-up (or explicit *config_path*),
        resolves *site_root* from the config file's parent directory, and
        merges CLI flags as highest-priority overrides.
        """
        toml_path = find_config(site_root, explicit=config_path)

        resolved_root = site_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                site_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    @property
    def output_root(self) -> Path:
        """Absolute build output directory."""
        out = Path(self.build.output_dir)
        return out if out.is_absolute() else self.site_root / out
