"""Author registry — ``_data/authors.yml``.

The registry is a mapping of author key to record. A post's ``author``
front-matter value is a foreign key into it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from ruamel.yaml import YAML


class AuthorRecord(BaseModel):
    """One author entry."""

    model_config = ConfigDict(frozen=True, extra="allow")

    key: str
    name: str
    bio: str | None = None
    picture: str | None = None
    url: str | None = None
    twitter: str | None = None
    location: str | None = None


class AuthorRegistryError(ValueError):
    """The registry file is not a mapping of author records."""


def load_authors(text: str) -> dict[str, AuthorRecord]:
    """Parse registry YAML into ``{key: AuthorRecord}``.

    Entries may omit ``name`` or leave it null; the key stands in for it.
    Other null fields are treated as absent.

    Raises:
        AuthorRegistryError: Top level or an entry is not a mapping.
        pydantic.ValidationError: An entry has a malformed field.
    """
    data: Any = YAML(typ="safe").load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = "Author registry must be a mapping of author keys"
        raise AuthorRegistryError(msg)

    authors: dict[str, AuthorRecord] = {}
    for key, entry in data.items():
        if entry is None:
            entry = {}
        if not isinstance(entry, dict):
            msg = f"Author {key!r} must be a mapping"
            raise AuthorRegistryError(msg)
        fields = {k: v for k, v in entry.items() if v is not None}
        record = {"name": str(key), **fields, "key": str(key)}
        authors[str(key)] = AuthorRecord.model_validate(record)
    return authors
