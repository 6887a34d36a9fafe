"""Tests for the author registry."""

import pytest
from pydantic import ValidationError

from blogctl.domain.authors import AuthorRecord, AuthorRegistryError, load_authors


class TestLoadAuthors:
    def test_loads_records(self) -> None:
        authors = load_authors("jane:\n  name: Jane Doe\n  bio: Compilers.\n  location: Berlin\n")
        assert set(authors) == {"jane"}
        jane = authors["jane"]
        assert isinstance(jane, AuthorRecord)
        assert jane.key == "jane"
        assert jane.name == "Jane Doe"
        assert jane.bio == "Compilers."
        assert jane.location == "Berlin"

    def test_name_defaults_to_key(self) -> None:
        assert load_authors("bob:\n  bio: hi\n")["bob"].name == "bob"

    def test_null_entry(self) -> None:
        assert load_authors("ghost:\n")["ghost"].name == "ghost"

    def test_null_name_falls_back_to_key(self) -> None:
        record = load_authors("jane:\n  name:\n  bio: Compilers.\n")["jane"]
        assert record.name == "jane"
        assert record.bio == "Compilers."

    def test_empty_file(self) -> None:
        assert load_authors("") == {}

    def test_extra_fields_kept(self) -> None:
        record = load_authors("jane:\n  github: jdoe\n")["jane"]
        assert record.model_extra == {"github": "jdoe"}

    def test_top_level_list_rejected(self) -> None:
        with pytest.raises(AuthorRegistryError):
            load_authors("- jane\n- bob\n")

    def test_scalar_entry_rejected(self) -> None:
        with pytest.raises(AuthorRegistryError, match="jane"):
            load_authors("jane: Jane Doe\n")

    def test_malformed_field(self) -> None:
        with pytest.raises(ValidationError):
            load_authors("jane:\n  name: [not, a, string]\n")
