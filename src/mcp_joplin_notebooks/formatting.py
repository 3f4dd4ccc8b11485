"""Plain-text renderings of notebook records for MCP tool results."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from .models import FolderRecord, NoteRecord, Outcome

DEFAULT_LIMIT = 50
DEFAULT_ORDER_BY = "updated_time"
DEFAULT_ORDER_DIR = "DESC"


def format_timestamp(ms: int | None) -> str:
    """Joplin timestamps are milliseconds since the epoch."""
    if not ms:
        return "unknown"
    try:
        return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return str(ms)


def render_outcome(outcome: Outcome) -> str:
    if outcome.error is None:
        return outcome.text or ""
    error = outcome.error
    lines = [f"Error: {error.message}"]
    if error.identifier and error.identifier not in error.message:
        lines.append(f'Affected ID: "{error.identifier}"')
    if error.hint:
        lines.append(error.hint)
    return "\n".join(lines)


def folder_location(parent_id: str, parent_title: str | None) -> str:
    if not parent_id:
        return "Root level"
    if parent_title:
        return f'Inside "{parent_title}" ({parent_id})'
    return f"Inside parent folder ({parent_id})"


def _todo_status(note: NoteRecord) -> str:
    return "Completed" if note.todo_completed else "Not completed"


# Read path


def notebook_tree_text(lines: list[str]) -> str:
    header = [
        "Joplin Notebooks:",
        "",
        "NOTE: To read a notebook, use the notebook_id with the read_notebook command",
        'Example: read_notebook notebook_id="your-notebook-id"',
        "",
    ]
    if not lines:
        lines = ["(No notebooks found. Create one with: create_folder title=\"folder name\")"]
    return "\n".join(header + lines)


def empty_notebook_text(folder: FolderRecord) -> str:
    return (
        f'Notebook "{folder.title}" (notebook_id: "{folder.id}") is empty.\n\n'
        "Try another notebook ID or use list_notebooks to see all available notebooks."
    )


def notebook_contents_text(folder: FolderRecord, notes: list[NoteRecord]) -> str:
    lines = [
        f'# Notebook: "{folder.title}" (notebook_id: "{folder.id}")',
        f"Contains {len(notes)} notes:",
        "",
        f'NOTE: This is showing the contents of notebook "{folder.title}", not a specific note.',
        "",
    ]
    if len(notes) > 1:
        lines.append(f"TIP: To read all {len(notes)} notes at once, use:")
        lines.append(f"read_multinote note_ids={json.dumps([n.id for n in notes])}")
        lines.append("")

    for note in sorted(notes, key=lambda n: n.updated_time or 0, reverse=True):
        if note.is_todo:
            checkbox = "✅" if note.todo_completed else "☐"
            lines.append(f'- {checkbox} Note: "{note.title}" (note_id: "{note.id}")')
        else:
            lines.append(f'- Note: "{note.title}" (note_id: "{note.id}")')
        lines.append(f"  Updated: {format_timestamp(note.updated_time)}")
        lines.append(f'  To read this note: read_note note_id="{note.id}"')
        lines.append("")
    return "\n".join(lines)


def note_text(note: NoteRecord, notebook_title: str | None) -> str:
    if notebook_title:
        notebook = f'"{notebook_title}" (notebook_id: "{note.parent_id}")'
    elif note.parent_id:
        notebook = f'Unknown notebook (notebook_id: "{note.parent_id}")'
    else:
        notebook = "Unknown notebook"

    lines = [
        f'# Note: "{note.title}"',
        f"Note ID: {note.id}",
        f"Notebook: {notebook}",
    ]
    if note.is_todo:
        lines.append(f"Status: {_todo_status(note)}")
        if note.todo_due:
            lines.append(f"Due: {format_timestamp(note.todo_due)}")
    lines.append(f"Created: {format_timestamp(note.created_time)}")
    lines.append(f"Updated: {format_timestamp(note.updated_time)}")
    lines.append("\n---\n")
    lines.append(note.body or "(This note has no content)")
    lines.append("\n---\n")
    lines.append("Related commands:")
    if note.parent_id:
        lines.append(
            "- To view the notebook containing this note: "
            f'read_notebook notebook_id="{note.parent_id}"'
        )
    lines.append('- To search for more notes: search_notes query="your search term"')
    return "\n".join(lines)


def multinote_text(sections: list[str]) -> str:
    header = f"# Reading {len(sections)} notes"
    separator = "\n\n" + "=" * 40 + "\n\n"
    return header + separator + separator.join(sections)


def list_notes_command(
    folder_id: str | None, page: int, limit: int, order_by: str, order_dir: str
) -> str:
    parts = ["get_all_notes"]
    if folder_id:
        parts.append(f'folder_id="{folder_id}"')
    if page != 1:
        parts.append(f"page={page}")
    if limit != DEFAULT_LIMIT:
        parts.append(f"limit={limit}")
    if order_by != DEFAULT_ORDER_BY:
        parts.append(f'order_by="{order_by}"')
    if order_dir != DEFAULT_ORDER_DIR:
        parts.append(f'order_dir="{order_dir}"')
    return " ".join(parts)


def notes_page_text(
    notes: list[NoteRecord],
    *,
    folder_id: str | None,
    folder_titles: dict[str, str],
    page: int,
    limit: int,
    order_by: str,
    order_dir: str,
    has_more: bool,
    total: int | None,
) -> str:
    if not notes:
        lines = ["📝 No notes found in the specified folder" if folder_id else "📝 No notes found"]
        if folder_id:
            lines.append(f"Folder ID: {folder_id}")
        lines += [
            "",
            "Suggestions:",
            '- Create a new note: create_note title="my note"',
            '- Search for notes: search_notes query="search term"',
            "- List all folders: list_notebooks",
        ]
        return "\n".join(lines)

    count = f"{len(notes)} of {total or len(notes)}"
    if folder_id:
        folder_name = folder_titles.get(folder_id, "Unknown folder")
        lines = [f'📝 Notes in "{folder_name}" ({count})', f"Folder ID: {folder_id}"]
    else:
        lines = [f"📝 All Notes ({count})"]
    lines.append(f"Page: {page}, Limit: {limit}")
    lines.append(f"Sorted by: {order_by} {order_dir}")

    for index, note in enumerate(notes, start=1):
        lines.append("")
        lines.append(f'{index}. "{note.title}"')
        lines.append(f"   ID: {note.id}")
        if not folder_id and note.parent_id:
            lines.append(f"   Folder: {folder_titles.get(note.parent_id, note.parent_id)}")
        if note.is_todo:
            lines.append(f"   Todo: {_todo_status(note)}")
            if note.todo_due:
                lines.append(f"   Due: {format_timestamp(note.todo_due)}")
        lines.append(f"   Updated: {format_timestamp(note.updated_time)}")

    if has_more or page > 1:
        lines += ["", "📄 Pagination:"]
        if page > 1:
            prev = list_notes_command(folder_id, page - 1, limit, order_by, order_dir)
            lines.append(f"   Previous: {prev}")
        if has_more:
            nxt = list_notes_command(folder_id, page + 1, limit, order_by, order_dir)
            lines.append(f"   Next: {nxt}")

    lines += [
        "",
        "Related commands:",
        '- To read a note: read_note note_id="note-id"',
        '- To search notes: search_notes query="search term"',
        '- To create a note: create_note title="note title"',
    ]
    return "\n".join(lines)


def search_results_text(
    query: str,
    notes: list[NoteRecord],
    folder_titles: dict[str, str],
    *,
    has_more: bool,
) -> str:
    if not notes:
        return (
            f'No notes found matching "{query}".\n\n'
            "Try a different search term or use list_notebooks to browse notebooks."
        )

    by_folder: dict[str, list[NoteRecord]] = {}
    for note in notes:
        by_folder.setdefault(note.parent_id, []).append(note)

    more = " (more results available, refine the query)" if has_more else ""
    lines = [f'Found {len(notes)} notes matching "{query}"{more}:', ""]
    for folder_id, folder_notes in by_folder.items():
        if folder_id:
            title = folder_titles.get(folder_id, "Unknown notebook")
            lines.append(f'Notebook: "{title}" (notebook_id: "{folder_id}")')
        else:
            lines.append("Notebook: (none)")
        for note in folder_notes:
            lines.append(f'  - Note: "{note.title}" (note_id: "{note.id}")')
            lines.append(f"    Updated: {format_timestamp(note.updated_time)}")
        lines.append("")

    lines.append('To read a note: read_note note_id="note-id"')
    if len(notes) > 1:
        lines.append(f"To read all of them: read_multinote note_ids={json.dumps([n.id for n in notes])}")
    return "\n".join(lines)


def folder_details_text(
    folder: FolderRecord,
    *,
    parent_title: str | None,
    subfolders: list[FolderRecord] | None,
    note_count: int | None,
    recent_notes: list[NoteRecord],
) -> str:
    lines = [
        f'📁 Folder: "{folder.title}"',
        f"ID: {folder.id}",
        f"Location: {folder_location(folder.parent_id, parent_title)}",
        f"Created: {format_timestamp(folder.created_time)}",
        f"Updated: {format_timestamp(folder.updated_time)}",
        "",
        "📊 Contents Summary:",
        f"- Notes: {note_count if note_count is not None else 'unknown'}",
        f"- Sub-folders: {len(subfolders) if subfolders is not None else 'unknown'}",
    ]

    if subfolders:
        lines += ["", "📁 Sub-folders:"]
        for index, sub in enumerate(subfolders, start=1):
            lines.append(f'   {index}. "{sub.title}" ({sub.id})')

    if recent_notes:
        lines += ["", "📝 Recent Notes:"]
        for index, note in enumerate(recent_notes, start=1):
            lines.append(f'   {index}. "{note.title}"')
            lines.append(f"      ID: {note.id}")
            if note.is_todo:
                lines.append(f"      Todo: {_todo_status(note)}")
            lines.append(f"      Updated: {format_timestamp(note.updated_time)}")
        if note_count is not None and note_count > len(recent_notes):
            lines.append(f"   ... and {note_count - len(recent_notes)} more notes")

    lines += [
        "",
        "🔧 Related Commands:",
        f'- View all contents: read_notebook notebook_id="{folder.id}"',
        f'- Get all notes in folder: get_all_notes folder_id="{folder.id}"',
        f'- Create note in folder: create_note title="note title" parent_id="{folder.id}"',
        f'- Create sub-folder: create_folder title="sub folder" parent_id="{folder.id}"',
        f'- Update folder: update_folder folder_id="{folder.id}" title="new name"',
    ]
    if folder.parent_id:
        lines.append(f'- View parent folder: get_folder folder_id="{folder.parent_id}"')
    return "\n".join(lines)


# Write path


def created_note_text(note: NoteRecord) -> str:
    lines = [f'✅ Successfully created note "{note.title}"', f"Note ID: {note.id}"]
    lines.append(f"Notebook ID: {note.parent_id}" if note.parent_id else "Notebook: Default notebook")
    if note.is_todo:
        lines.append("Type: Todo item")
        if note.todo_due:
            lines.append(f"Due: {format_timestamp(note.todo_due)}")
    else:
        lines.append("Type: Regular note")
    lines.append(f"Created: {format_timestamp(note.created_time)}")
    lines += ["", "Next steps:", f'- To read this note: read_note note_id="{note.id}"']
    if note.parent_id:
        lines.append(f'- To view the notebook: read_notebook notebook_id="{note.parent_id}"')
    lines.append(
        f'- To update this note: update_note note_id="{note.id}" title="new title" body="new content"'
    )
    return "\n".join(lines)


_NOTE_FIELD_LABELS = {
    "title": "title",
    "body": "content",
    "parent_id": "notebook",
    "is_todo": "todo status",
    "todo_completed": "completion status",
    "todo_due": "due date",
}


def updated_note_text(note: NoteRecord, changes: dict[str, Any]) -> str:
    lines = [f'✅ Successfully updated note "{note.title}"', f"Note ID: {note.id}"]
    lines.append(f"Notebook ID: {note.parent_id}" if note.parent_id else "Notebook: Default notebook")
    if note.is_todo:
        lines.append(f"Type: Todo item ({_todo_status(note)})")
        if note.todo_due:
            lines.append(f"Due: {format_timestamp(note.todo_due)}")
        if note.todo_completed:
            lines.append(f"Completed: {format_timestamp(note.todo_completed)}")
    else:
        lines.append("Type: Regular note")
    lines.append(f"Last updated: {format_timestamp(note.updated_time)}")
    labels = [label for key, label in _NOTE_FIELD_LABELS.items() if key in changes]
    if labels:
        lines.append(f"Updated fields: {', '.join(labels)}")
    lines += ["", "Next steps:", f'- To read this note: read_note note_id="{note.id}"']
    if note.parent_id:
        lines.append(f'- To view the notebook: read_notebook notebook_id="{note.parent_id}"')
    return "\n".join(lines)


def deleted_note_text(note_id: str, title: str | None, notebook_title: str | None) -> str:
    lines = [f'✅ Successfully moved note "{title or "Unknown note"}" to trash', f"Note ID: {note_id}"]
    if notebook_title:
        lines.append(f'Location: from notebook "{notebook_title}"')
    lines += [
        "",
        "ℹ️  Note Details:",
        "- The note has been moved to the trash (soft deleted)",
        "- You can restore it from Joplin's trash if needed",
        "",
        "Related commands:",
        "- To see all notes: get_all_notes",
        '- To search for notes: search_notes query="your search term"',
    ]
    return "\n".join(lines)


def created_folder_text(folder: FolderRecord, parent_title: str | None) -> str:
    lines = [
        f'✅ Successfully created folder "{folder.title}"',
        f"Folder ID: {folder.id}",
        f"Location: {folder_location(folder.parent_id, parent_title)}",
        f"Created: {format_timestamp(folder.created_time)}",
        "",
        "Next steps:",
        f'- To view this folder: get_folder folder_id="{folder.id}"',
        f'- To read folder contents: read_notebook notebook_id="{folder.id}"',
        f'- To create a note in this folder: create_note title="note title" parent_id="{folder.id}"',
        f'- To create a sub-folder: create_folder title="sub folder name" parent_id="{folder.id}"',
        "- To see all folders: list_notebooks",
    ]
    return "\n".join(lines)


def updated_folder_text(
    folder: FolderRecord, parent_title: str | None, changes: dict[str, Any]
) -> str:
    lines = [
        f'✅ Successfully updated folder "{folder.title}"',
        f"Folder ID: {folder.id}",
        f"Location: {folder_location(folder.parent_id, parent_title)}",
        f"Last updated: {format_timestamp(folder.updated_time)}",
    ]
    labels = [label for key, label in (("title", "title"), ("parent_id", "location")) if key in changes]
    if labels:
        lines.append(f"Updated fields: {', '.join(labels)}")
    lines += [
        "",
        "Next steps:",
        f'- To view this folder: get_folder folder_id="{folder.id}"',
        f'- To read folder contents: read_notebook notebook_id="{folder.id}"',
        "- To see all folders: list_notebooks",
    ]
    return "\n".join(lines)


def deleted_folder_text(
    folder_id: str,
    *,
    title: str | None,
    parent_title: str | None,
    note_count: int | None,
    subfolder_count: int | None,
) -> str:
    lines = [
        f'✅ Successfully moved folder "{title or "Unknown folder"}" to trash',
        f"Folder ID: {folder_id}",
    ]
    if parent_title:
        lines.append(f'Location: inside "{parent_title}"')
    lines += [
        "",
        "ℹ️  Deletion Details:",
        "- The folder has been moved to the trash (soft deleted)",
        "- You can restore it from Joplin's trash if needed",
    ]
    if note_count:
        lines.append(f"- {note_count} note(s) in this folder were also moved to trash")
    if subfolder_count:
        lines.append(f"- {subfolder_count} sub-folder(s) were also moved to trash")
    if note_count == 0 and subfolder_count == 0:
        lines.append("- This folder was empty")
    lines += [
        "",
        "Related commands:",
        "- To see all folders: list_notebooks",
        '- To create a new folder: create_folder title="folder name"',
    ]
    return "\n".join(lines)
