"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, blogctl.toml only contains
overrides. A fresh site needs only [site] title and url.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NavItem(BaseModel):
    """One entry of the site navigation bar."""

    model_config = {"frozen": True}

    label: str
    url: str


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    title: str = "My Technical Blog"
    description: str = ""
    url: str = "http://localhost:4000"
    baseurl: str = ""
    lang: str = "en"
    logo: str | None = None
    cover: str | None = None
    default_author: str | None = None
    navigation: list[NavItem] = Field(
        default_factory=lambda: [NavItem(label="Home", url="/")]
    )
    footer_text: str = ""


class SourceDirs(BaseModel):
    """[build.source_dirs] section."""

    model_config = {"frozen": True}

    posts: str = "_posts"
    drafts: str = "_drafts"
    pages: str = "_pages"


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    source_dirs: SourceDirs = Field(default_factory=SourceDirs)
    output_dir: str = "_site"
    permalink: str = "/:year/:month/:day/:slug/"
    paginate: int = Field(default=5, ge=1)
    excerpt_words: int = Field(default=40, ge=1)
    feed_limit: int = Field(default=20, ge=1)
    exclude: list[str] = Field(default_factory=lambda: ["README.md", "Gemfile*", "*.toml"])


class ScriptsConfig(BaseModel):
    """[scripts] section.

    Bundle names are selected per page class; each bundle is a list of
    script URLs emitted at the end of the document body.
    """

    model_config = {"frozen": True}

    analytics_id: str | None = None
    icon_font_url: str | None = None
    math_url: str = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
    bundles: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "site": ["/assets/js/site.js"],
            "post": [],
            "archive": [],
        }
    )


class CompileHealthConfig(BaseModel):
    """[compile_health] section."""

    model_config = {"frozen": True}

    data_url: str | None = None
    source_url: str | None = None
    columns: list[str] = Field(
        default_factory=lambda: ["Header", "Compile time (s)", "Binary size (KiB)", "Delta"]
    )


class CheckConfig(BaseModel):
    """[check] section."""

    model_config = {"frozen": True}

    links: bool = False
    allow_unknown_classes: bool = False

