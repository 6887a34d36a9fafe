"""Locate a site's ``blogctl.toml``.

Lookup order: the ``--config`` flag, then ``BLOGCTL_CONFIG``, then a walk up
from the working directory. An explicit location may name the file itself or
the site directory that holds it; an explicit location that has no config
never falls through to the walk-up.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "blogctl.toml"
CONFIG_ENV_VAR = "BLOGCTL_CONFIG"


def config_in(location: str | Path) -> Path | None:
    """The config file named by *location*, a file or a site directory."""
    path = Path(location).expanduser()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    return path if path.is_file() else None


def find_config(start: Path | None = None, *, explicit: str | Path | None = None) -> Path | None:
    """Return the ``blogctl.toml`` governing *start* (default: cwd), or None."""
    for override in (explicit, os.environ.get(CONFIG_ENV_VAR)):
        if override:
            return config_in(override)

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
