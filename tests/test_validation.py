from __future__ import annotations

import pytest

from mcp_joplin_notebooks import validation as v
from mcp_joplin_notebooks.errors import ValidationError

GOOD_ID = "58a0a29f68bc4141b49c99f5d367638a"


@pytest.mark.parametrize("value", [GOOD_ID, GOOD_ID.upper()])
def test_validate_id_accepts_hex_tokens(value: str) -> None:
    v.validate_id(value, "note ID")


@pytest.mark.parametrize("value", ["", None, "abc", GOOD_ID[:-1], GOOD_ID[:-1] + "z", 123])
def test_validate_id_rejects_malformed(value) -> None:
    with pytest.raises(ValidationError):
        v.validate_id(value, "note ID")


def test_optional_id_skips_blank() -> None:
    v.validate_optional_id(None, "folder ID")
    v.validate_optional_id("", "folder ID")


@pytest.mark.parametrize("title", ["", "   ", None, 5, "x" * 256])
def test_validate_title_rejects(title) -> None:
    with pytest.raises(ValidationError):
        v.validate_title(title)


def test_optional_title_rules() -> None:
    v.validate_optional_title(None)
    v.validate_optional_title("")
    v.validate_optional_title("x" * 255)
    with pytest.raises(ValidationError):
        v.validate_optional_title("  ")
    with pytest.raises(ValidationError):
        v.validate_optional_title("x" * 256)


@pytest.mark.parametrize("value", [1, "yes", 0.0])
def test_booleans_must_be_bool(value) -> None:
    with pytest.raises(ValidationError):
        v.validate_optional_bool(value, "is_todo")


@pytest.mark.parametrize("value", [-1, "tomorrow", True, 1.5, 10**16])
def test_timestamps_must_be_whole_milliseconds_in_range(value) -> None:
    with pytest.raises(ValidationError):
        v.validate_optional_timestamp(value, "todo_due")


@pytest.mark.parametrize(("page", "limit"), [(0, None), (None, 0), (None, 101), ("1", None)])
def test_pagination_bounds(page, limit) -> None:
    with pytest.raises(ValidationError):
        v.validate_pagination(page, limit)


def test_order_params() -> None:
    v.validate_order("title", "asc")
    with pytest.raises(ValidationError):
        v.validate_order("body", None)
    with pytest.raises(ValidationError):
        v.validate_order(None, "sideways")


def test_at_least_one_field_counts_empty_strings_as_absent() -> None:
    with pytest.raises(ValidationError):
        v.validate_at_least_one({"title": "", "parent_id": None})
    v.validate_at_least_one({"title": None, "is_todo": False})


def test_require_read_id_catches_titles() -> None:
    with pytest.raises(ValidationError) as info:
        v.require_read_id("Groceries", "note", tool="read_note", listing="search_notes")
    assert info.value.identifier == "Groceries"
    assert "search_notes" in info.value.hint


@pytest.mark.parametrize("value", [None, 0, 1_700_000_000_000, 1_700_000_000_000.0, v.MAX_TIMESTAMP])
def test_timestamps_accept_whole_milliseconds(value) -> None:
    v.validate_optional_timestamp(value, "todo_due")
