"""Notebook operations exposed as MCP tools.

Every public coroutine of :class:`NotebookService` returns an :class:`Outcome`
and never raises a :class:`NotebookError`. Writes follow the same order:
local validation, operation rules, the ancestry check for folder moves, then
exactly one write carrying only the fields the caller supplied. Lookups made
only to enrich the reply (parent titles, counts) are best effort.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Iterable
from typing import Any, TypeVar

from . import formatting
from . import validation as v
from .ancestry import ensure_relocation_is_safe
from .errors import NotebookError, UnexpectedResponseShape, ValidationError
from .fetcher import fetch_collection, fetch_folder_records
from .models import FolderNode, FolderRecord, Kind, NoteRecord, Outcome, parse_record
from .ports import BackendClient
from .tree import build_folder_nodes, group_by_parent, render_notebook_lines, sort_siblings

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOTE_FIELDS = "id,title,body,parent_id,created_time,updated_time,is_todo,todo_completed,todo_due"
NOTE_LIST_FIELDS = (
    "id,title,parent_id,is_todo,todo_completed,todo_due,created_time,updated_time,"
    "user_created_time,user_updated_time"
)
NOTEBOOK_NOTE_FIELDS = "id,title,updated_time,is_todo,todo_completed"
FOLDER_DETAIL_FIELDS = "id,title,parent_id,created_time,updated_time"
RECENT_NOTES = 5

_FOLDERS_HINT = "Use list_notebooks to see available folders."
_NOTES_HINT = "Use search_notes to find valid note IDs."


def _items(raw: dict[str, Any], action: str) -> list[dict[str, Any]]:
    items = raw.get("items")
    if not isinstance(items, list):
        raise UnexpectedResponseShape(f"Unexpected response format from Joplin API when {action}.")
    return items


def _check_todo_due(is_todo: bool | None, todo_due: float | None) -> None:
    if is_todo is False and todo_due is not None:
        raise ValidationError("todo_due cannot be set when is_todo is false.")


async def best_effort(work: Awaitable[T], what: str) -> T | None:
    """Await ``work``; a backend failure yields ``None`` instead of an error."""
    try:
        return await work
    except NotebookError as exc:
        logger.debug("Skipping %s: %s", what, exc.message)
        return None


async def lookup_folder_title(client: BackendClient, folder_id: str | None) -> str | None:
    if not folder_id:
        return None
    raw = await best_effort(
        client.fetch_one(Kind.FOLDER, folder_id, "id,title"), f"title of folder {folder_id}"
    )
    return (raw or {}).get("title") or None


async def lookup_folder_titles(client: BackendClient, folder_ids: Iterable[str]) -> dict[str, str]:
    ids = sorted({i for i in folder_ids if i})
    titles = await asyncio.gather(*(lookup_folder_title(client, i) for i in ids))
    return {i: t for i, t in zip(ids, titles) if t}


class NotebookService:
    def __init__(self, client: BackendClient, *, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    async def _run(
        self,
        operation: str,
        work: Awaitable[str],
        *,
        subject: str | None = None,
        hint: str | None = None,
    ) -> Outcome:
        try:
            text = await work
        except NotebookError as exc:
            if isinstance(exc, ValidationError):
                logger.info("%s rejected: %s", operation, exc.message)
            else:
                logger.warning("%s failed (%s): %s", operation, exc.kind.value, exc.message)
                if exc.identifier is None:
                    exc.identifier = subject or None
            if exc.hint is None:
                exc.hint = hint
            return Outcome.failure(exc)
        return Outcome.success(text)

    # Tree

    async def folder_tree(self) -> list[FolderNode]:
        folders = await fetch_folder_records(self._client, page_size=self._page_size)
        return build_folder_nodes(group_by_parent(folders))

    async def list_notebook_tree(self) -> Outcome:
        return await self._run("list_notebooks", self._list_notebook_tree(), hint=_FOLDERS_HINT)

    async def _list_notebook_tree(self) -> str:
        folders = await fetch_folder_records(self._client, page_size=self._page_size)
        return formatting.notebook_tree_text(render_notebook_lines(group_by_parent(folders)))

    # Reads

    async def read_notebook(self, notebook_id: str) -> Outcome:
        return await self._run(
            "read_notebook",
            self._read_notebook(notebook_id),
            subject=notebook_id,
            hint="Use list_notebooks to see all available notebooks with their IDs.",
        )

    async def _read_notebook(self, notebook_id: str) -> str:
        v.require_read_id(notebook_id, "notebook", tool="read_notebook", listing="list_notebooks")
        raw = await self._client.fetch_one(Kind.FOLDER, notebook_id, "id,title,parent_id")
        folder = parse_record(FolderRecord, raw, "fetching notebook")
        raw_notes = await fetch_collection(
            self._client,
            Kind.NOTE,
            fields=NOTEBOOK_NOTE_FIELDS,
            parent_id=notebook_id,
            page_size=self._page_size,
        )
        notes = [parse_record(NoteRecord, n, "fetching notes") for n in raw_notes]
        if not notes:
            return formatting.empty_notebook_text(folder)
        return formatting.notebook_contents_text(folder, notes)

    async def read_note(self, note_id: str) -> Outcome:
        return await self._run(
            "read_note", self._read_note(note_id), subject=note_id, hint=_NOTES_HINT
        )

    async def _read_note(self, note_id: str) -> str:
        v.require_read_id(note_id, "note", tool="read_note", listing="search_notes")
        raw = await self._client.fetch_one(Kind.NOTE, note_id, NOTE_FIELDS)
        note = parse_record(NoteRecord, raw, "fetching note")
        notebook_title = await lookup_folder_title(self._client, note.parent_id)
        return formatting.note_text(note, notebook_title)

    async def read_notes(self, note_ids: list[str]) -> Outcome:
        return await self._run("read_multinote", self._read_notes(note_ids), hint=_NOTES_HINT)

    async def _read_notes(self, note_ids: list[str]) -> str:
        if not isinstance(note_ids, (list, tuple)) or not note_ids:
            raise ValidationError(
                "Please provide a list of note IDs.",
                hint='Example: read_multinote note_ids=["note-id-1", "note-id-2"]',
            )
        sections = await asyncio.gather(*(self._note_section(i) for i in note_ids))
        return formatting.multinote_text(list(sections))

    async def _note_section(self, note_id: str) -> str:
        # One unreadable note does not hide the others.
        try:
            return await self._read_note(note_id)
        except NotebookError as exc:
            logger.debug("read_multinote: note %s failed: %s", note_id, exc.message)
            return f'Error reading note "{note_id}": {exc.message}'

    async def list_notes(
        self,
        folder_id: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        order_by: str | None = None,
        order_dir: str | None = None,
    ) -> Outcome:
        return await self._run(
            "get_all_notes",
            self._list_notes(folder_id, page, limit, order_by, order_dir),
            subject=folder_id,
            hint=_FOLDERS_HINT,
        )

    async def _list_notes(
        self,
        folder_id: str | None,
        page: int | None,
        limit: int | None,
        order_by: str | None,
        order_dir: str | None,
    ) -> str:
        v.validate_optional_id(folder_id, "folder ID")
        v.validate_pagination(page, limit)
        v.validate_order(order_by, order_dir)

        page = page or 1
        limit = min(limit or formatting.DEFAULT_LIMIT, v.MAX_PAGE_LIMIT)
        order_by = order_by or formatting.DEFAULT_ORDER_BY
        order_dir = (order_dir or formatting.DEFAULT_ORDER_DIR).upper()
        folder_id = folder_id or None

        raw = await self._client.fetch_page(
            Kind.NOTE,
            fields=NOTE_LIST_FIELDS,
            page=page,
            limit=limit,
            parent_id=folder_id,
            order_by=order_by,
            order_dir=order_dir,
        )
        notes = [parse_record(NoteRecord, n, "getting notes") for n in _items(raw, "getting notes")]
        wanted = {n.parent_id for n in notes}
        if folder_id:
            wanted.add(folder_id)
        titles = await lookup_folder_titles(self._client, wanted)
        return formatting.notes_page_text(
            notes,
            folder_id=folder_id,
            folder_titles=titles,
            page=page,
            limit=limit,
            order_by=order_by,
            order_dir=order_dir,
            has_more=bool(raw.get("has_more")),
            total=raw.get("total"),
        )

    async def get_folder(self, folder_id: str) -> Outcome:
        return await self._run(
            "get_folder", self._get_folder(folder_id), subject=folder_id, hint=_FOLDERS_HINT
        )

    async def _get_folder(self, folder_id: str) -> str:
        v.validate_id(folder_id, "folder ID")
        raw = await self._client.fetch_one(Kind.FOLDER, folder_id, FOLDER_DETAIL_FIELDS)
        folder = parse_record(FolderRecord, raw, "getting folder")

        parent_title, folders, raw_notes = await asyncio.gather(
            lookup_folder_title(self._client, folder.parent_id),
            best_effort(
                fetch_folder_records(self._client, page_size=self._page_size), "sub-folders"
            ),
            best_effort(
                fetch_collection(
                    self._client,
                    Kind.NOTE,
                    fields=NOTEBOOK_NOTE_FIELDS,
                    parent_id=folder_id,
                    page_size=self._page_size,
                ),
                "folder notes",
            ),
        )

        subfolders = None
        if folders is not None:
            subfolders = sort_siblings(f for f in folders if f.parent_id == folder_id)
        note_count = None
        recent: list[NoteRecord] = []
        if raw_notes is not None:
            notes = [parse_record(NoteRecord, n, "getting folder notes") for n in raw_notes]
            note_count = len(notes)
            recent = sorted(notes, key=lambda n: n.updated_time or 0, reverse=True)[:RECENT_NOTES]

        return formatting.folder_details_text(
            folder,
            parent_title=parent_title,
            subfolders=subfolders,
            note_count=note_count,
            recent_notes=recent,
        )

    async def search_notes(self, query: str) -> Outcome:
        return await self._run(
            "search_notes",
            self._search_notes(query),
            hint="Try a different search term or use list_notebooks to browse notebooks.",
        )

    async def _search_notes(self, query: str) -> str:
        if not isinstance(query, str) or not query.strip():
            raise ValidationError(
                "Please provide a search query.",
                hint='Example: search_notes query="meeting notes"',
            )
        query = query.strip()
        raw = await self._client.fetch_page(
            Kind.NOTE,
            fields="id,title,parent_id,updated_time",
            page=1,
            limit=self._page_size,
            query=query,
        )
        items = _items(raw, "searching notes")
        notes = [parse_record(NoteRecord, n, "searching notes") for n in items]
        titles = await lookup_folder_titles(self._client, (n.parent_id for n in notes))
        return formatting.search_results_text(
            query, notes, titles, has_more=bool(raw.get("has_more"))
        )

    # Note writes

    async def create_note(
        self,
        title: str,
        body: str | None = None,
        parent_id: str | None = None,
        is_todo: bool | None = None,
        todo_due: int | None = None,
    ) -> Outcome:
        return await self._run(
            "create_note",
            self._create_note(title, body, parent_id, is_todo, todo_due),
            subject=parent_id,
            hint="Use list_notebooks to see available notebooks.",
        )

    async def _create_note(
        self,
        title: str,
        body: str | None,
        parent_id: str | None,
        is_todo: bool | None,
        todo_due: int | None,
    ) -> str:
        v.validate_title(title)
        v.validate_optional_id(parent_id, "notebook ID")
        v.validate_optional_body(body)
        v.validate_optional_bool(is_todo, "is_todo")
        v.validate_optional_timestamp(todo_due, "todo_due")
        _check_todo_due(is_todo, todo_due)

        payload: dict[str, Any] = {"title": title.strip()}
        if body is not None:
            payload["body"] = body
        if parent_id:
            payload["parent_id"] = parent_id
        if is_todo is not None:
            payload["is_todo"] = int(is_todo)
        if todo_due is not None:
            payload["todo_due"] = int(todo_due)

        raw = await self._client.create(Kind.NOTE, payload)
        note = parse_record(NoteRecord, raw, "creating note")
        logger.info("Created note %s", note.id)
        return formatting.created_note_text(note)

    async def update_note(
        self,
        note_id: str,
        title: str | None = None,
        body: str | None = None,
        parent_id: str | None = None,
        is_todo: bool | None = None,
        todo_completed: bool | None = None,
        todo_due: int | None = None,
    ) -> Outcome:
        return await self._run(
            "update_note",
            self._update_note(note_id, title, body, parent_id, is_todo, todo_completed, todo_due),
            subject=note_id,
            hint=_NOTES_HINT,
        )

    async def _update_note(
        self,
        note_id: str,
        title: str | None,
        body: str | None,
        parent_id: str | None,
        is_todo: bool | None,
        todo_completed: bool | None,
        todo_due: int | None,
    ) -> str:
        v.validate_id(note_id, "note ID")
        v.validate_optional_title(title)
        v.validate_optional_id(parent_id, "notebook ID")
        v.validate_optional_body(body)
        v.validate_optional_bool(is_todo, "is_todo")
        v.validate_optional_bool(todo_completed, "todo_completed")
        v.validate_optional_timestamp(todo_due, "todo_due")
        v.validate_at_least_one(
            {
                "title": title,
                "body": body,
                "parent_id": parent_id,
                "is_todo": is_todo,
                "todo_completed": todo_completed,
                "todo_due": todo_due,
            }
        )
        _check_todo_due(is_todo, todo_due)

        payload: dict[str, Any] = {}
        if not v.is_blank(title):
            payload["title"] = title.strip()
        if body is not None:
            payload["body"] = body
        if not v.is_blank(parent_id):
            payload["parent_id"] = parent_id
        if is_todo is not None:
            payload["is_todo"] = int(is_todo)
        if todo_completed is not None:
            payload["todo_completed"] = int(time.time() * 1000) if todo_completed else 0
        if todo_due is not None:
            payload["todo_due"] = int(todo_due)

        raw = await self._client.update(Kind.NOTE, note_id, payload)
        note = parse_record(NoteRecord, raw, "updating note")
        logger.info("Updated note %s (%s)", note_id, ", ".join(payload))
        return formatting.updated_note_text(note, payload)

    async def delete_note(self, note_id: str) -> Outcome:
        return await self._run(
            "delete_note", self._delete_note(note_id), subject=note_id, hint=_NOTES_HINT
        )

    async def _delete_note(self, note_id: str) -> str:
        v.validate_id(note_id, "note ID")
        existing = await best_effort(
            self._client.fetch_one(Kind.NOTE, note_id, "id,title,parent_id"), f"note {note_id}"
        )
        existing = existing or {}
        notebook_title = await lookup_folder_title(self._client, existing.get("parent_id"))

        await self._client.delete(Kind.NOTE, note_id)
        logger.info("Deleted note %s", note_id)
        return formatting.deleted_note_text(note_id, existing.get("title"), notebook_title)

    # Folder writes

    async def create_folder(self, title: str, parent_id: str | None = None) -> Outcome:
        return await self._run(
            "create_folder",
            self._create_folder(title, parent_id),
            subject=parent_id,
            hint=_FOLDERS_HINT,
        )

    async def _create_folder(self, title: str, parent_id: str | None) -> str:
        v.validate_title(title)
        v.validate_optional_id(parent_id, "parent folder ID")

        payload: dict[str, Any] = {"title": title.strip()}
        if parent_id:
            payload["parent_id"] = parent_id

        raw = await self._client.create(Kind.FOLDER, payload)
        folder = parse_record(FolderRecord, raw, "creating folder")
        logger.info("Created folder %s", folder.id)
        parent_title = await lookup_folder_title(self._client, folder.parent_id)
        return formatting.created_folder_text(folder, parent_title)

    async def update_folder(
        self,
        folder_id: str,
        title: str | None = None,
        parent_id: str | None = None,
    ) -> Outcome:
        return await self._run(
            "update_folder",
            self._update_folder(folder_id, title, parent_id),
            subject=folder_id,
            hint=_FOLDERS_HINT,
        )

    async def _update_folder(
        self, folder_id: str, title: str | None, parent_id: str | None
    ) -> str:
        v.validate_id(folder_id, "folder ID")
        v.validate_optional_title(title)
        v.validate_optional_id(parent_id, "parent folder ID")
        v.validate_at_least_one({"title": title, "parent_id": parent_id})

        payload: dict[str, Any] = {}
        if not v.is_blank(title):
            payload["title"] = title.strip()
        if not v.is_blank(parent_id):
            await ensure_relocation_is_safe(self._client, folder_id, parent_id)
            payload["parent_id"] = parent_id

        raw = await self._client.update(Kind.FOLDER, folder_id, payload)
        folder = parse_record(FolderRecord, raw, "updating folder")
        logger.info("Updated folder %s (%s)", folder_id, ", ".join(payload))
        parent_title = await lookup_folder_title(self._client, folder.parent_id)
        return formatting.updated_folder_text(folder, parent_title, payload)

    async def delete_folder(self, folder_id: str) -> Outcome:
        return await self._run(
            "delete_folder", self._delete_folder(folder_id), subject=folder_id, hint=_FOLDERS_HINT
        )

    async def _delete_folder(self, folder_id: str) -> str:
        v.validate_id(folder_id, "folder ID")
        existing, folders, notes = await asyncio.gather(
            best_effort(
                self._client.fetch_one(Kind.FOLDER, folder_id, "id,title,parent_id"),
                f"folder {folder_id}",
            ),
            best_effort(
                fetch_folder_records(self._client, page_size=self._page_size), "sub-folders"
            ),
            best_effort(
                fetch_collection(
                    self._client,
                    Kind.NOTE,
                    fields="id",
                    parent_id=folder_id,
                    page_size=self._page_size,
                ),
                "folder notes",
            ),
        )
        existing = existing or {}
        parent_title = await lookup_folder_title(self._client, existing.get("parent_id"))
        subfolder_count = None
        if folders is not None:
            subfolder_count = sum(1 for f in folders if f.parent_id == folder_id)

        await self._client.delete(Kind.FOLDER, folder_id)
        logger.info("Deleted folder %s", folder_id)
        return formatting.deleted_folder_text(
            folder_id,
            title=existing.get("title"),
            parent_title=parent_title,
            note_count=None if notes is None else len(notes),
            subfolder_count=subfolder_count,
        )
