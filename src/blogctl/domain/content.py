"""Front-matter models and the pure parse/render utilities.

Front-matter attributes map 1:1 to YAML keys. The ``class`` key is the
page-type discriminator the page shell dispatches on; it is exposed as
``page_class`` in Python and keeps its YAML spelling on the way out.

Pure parsing utilities (``parse_frontmatter``, ``order_frontmatter``,
``render_frontmatter``) live here so that the dependency direction stays
clean: infrastructure -> domain, never the reverse.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from io import StringIO
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ruamel.yaml import YAML

# ---------------------------------------------------------------------------
# YAML parser (round-trip preserves comments and quote styles)
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a failed dump can leave a shared
    instance broken, so every call gets its own.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.width = 4096
    return y


CANONICAL_KEY_ORDER: list[str] = [
    "layout",
    "title",
    "date",
    "author",
    "tags",
    "excerpt",
    "class",
    "subclass",
    "cover",
    "navigation",
    "math",
    "permalink",
]

_FRONTMATTER_DELIMITER = "---"


class FrontmatterError(ValueError):
    """Raised when a front-matter block is present but is not a YAML mapping."""


# ---------------------------------------------------------------------------
# Pure parsing / rendering utilities
# ---------------------------------------------------------------------------


def has_frontmatter(content: str) -> bool:
    """True when *content* opens with a closed ``---`` block."""
    lines = content.replace("\r\n", "\n").split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return False
    return any(line.strip() == _FRONTMATTER_DELIMITER for line in lines[1:])


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front-matter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        delimiters are found, returns ``({}, content)``.

    Raises:
        FrontmatterError: The block parsed but is not a mapping.
        ruamel.yaml.YAMLError: The block is not valid YAML.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    loaded = _new_yaml().load(yaml_block)
    if loaded is None:
        return {}, body
    if not isinstance(loaded, dict):
        msg = f"Front-matter must be a mapping, got {type(loaded).__name__}"
        raise FrontmatterError(msg)
    return dict(loaded), body


def order_frontmatter(fm: dict[str, Any]) -> dict[str, Any]:
    """Return *fm* with keys in canonical order, ``None`` values dropped.

    Keys not in :data:`CANONICAL_KEY_ORDER` follow alphabetically.
    """
    ordered: dict[str, Any] = {}
    for key in CANONICAL_KEY_ORDER:
        if key in fm and fm[key] is not None:
            ordered[key] = fm[key]
    for key in sorted(fm.keys()):
        if key not in ordered and fm[key] is not None:
            ordered[key] = fm[key]
    return ordered


def render_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render a front-matter dict and body text into a markdown document."""
    ordered = order_frontmatter(frontmatter)
    buf = StringIO()
    _new_yaml().dump(ordered, buf)

    parts = [_FRONTMATTER_DELIMITER, "\n", buf.getvalue(), _FRONTMATTER_DELIMITER, "\n"]
    if body:
        parts.append(body)
    return "".join(parts)


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

# Jekyll-style "2019-03-01 10:00:00 +0100" → ISO "2019-03-01 10:00:00+01:00"
_SPACED_OFFSET = re.compile(r"^(.*\d{2}:\d{2}(?::\d{2})?)\s+([+-]\d{2}):?(\d{2})$")


def coerce_datetime(value: Any) -> Any:
    """Normalize YAML date values to naive wall-clock datetimes.

    Offsets are dropped rather than converted: the date an author wrote is
    the date that appears in the URL.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        match = _SPACED_OFFSET.match(text)
        if match:
            text = f"{match.group(1)}{match.group(2)}:{match.group(3)}"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return value  # let pydantic report it
        return parsed.replace(tzinfo=None)
    return value


def coerce_tags(value: Any) -> list[str]:
    """Accept a YAML list or a comma/space separated string; de-duplicate."""
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(",") if "," in value else value.split()
    elif isinstance(value, (list, tuple, set)):
        raw = [str(v) for v in value]
    else:
        raw = [str(value)]

    seen: dict[str, None] = {}
    for tag in raw:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


# ---------------------------------------------------------------------------
# Front-matter models
# ---------------------------------------------------------------------------


class DocumentFrontmatter(BaseModel):
    """Fields shared by posts, drafts, and pages.

    Unknown keys are kept (``extra="allow"``) and reach templates unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    title: str
    layout: str = "post"
    page_class: str | None = Field(default=None, alias="class")
    subclass: str | None = None
    excerpt: str | None = None
    cover: str | None = None
    navigation: bool = True
    math: bool = False
    permalink: str | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "title must not be empty"
            raise ValueError(msg)
        return value.strip()

    def to_frontmatter(self) -> dict[str, Any]:
        """Serialize to an ordered front-matter dict using YAML key names."""
        fm = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return order_frontmatter(fm)

    @property
    def extras(self) -> dict[str, Any]:
        """Keys present in the file that the model does not declare."""
        return dict(self.model_extra or {})


class PostFrontmatter(DocumentFrontmatter):
    """Front-matter of a post or draft."""

    date: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    author: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        return coerce_datetime(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        return coerce_tags(value)

    @property
    def effective_class(self) -> str:
        return self.page_class or "post-template"


class PageFrontmatter(DocumentFrontmatter):
    """Front-matter of a standalone page (about, compile health, ...)."""

    layout: str = "page"

    @property
    def effective_class(self) -> str:
        return self.page_class or "page-template"
