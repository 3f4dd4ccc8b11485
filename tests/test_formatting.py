from __future__ import annotations

from mcp_joplin_notebooks.errors import CircularReference, NotFound
from mcp_joplin_notebooks.formatting import (
    format_timestamp,
    list_notes_command,
    render_outcome,
)
from mcp_joplin_notebooks.models import Outcome


def test_success_renders_text_as_is() -> None:
    assert render_outcome(Outcome.success("done")) == "done"


def test_failure_names_identifier_and_hint() -> None:
    exc = CircularReference("Cannot move folder.", identifier="abc", hint="Use list_notebooks.")
    text = render_outcome(Outcome.failure(exc))
    assert text.splitlines() == [
        "Error: Cannot move folder.",
        'Affected ID: "abc"',
        "Use list_notebooks.",
    ]


def test_identifier_already_in_message_is_not_repeated() -> None:
    exc = NotFound('Note with ID "abc" not found.', identifier="abc")
    assert render_outcome(Outcome.failure(exc)) == 'Error: Note with ID "abc" not found.'


def test_missing_timestamp() -> None:
    assert format_timestamp(None) == "unknown"
    assert format_timestamp(0) == "unknown"


def test_out_of_range_timestamp_is_shown_raw() -> None:
    assert format_timestamp(10**16) == "10000000000000000"


def test_list_notes_command_omits_defaults() -> None:
    assert list_notes_command(None, 1, 50, "updated_time", "DESC") == "get_all_notes"
    assert (
        list_notes_command("f", 3, 10, "title", "ASC")
        == 'get_all_notes folder_id="f" page=3 limit=10 order_by="title" order_dir="ASC"'
    )
