"""In-memory stand-in for the Joplin Data API used by the service tests."""

from __future__ import annotations

import time
import uuid
from typing import Any

from mcp_joplin_notebooks.errors import NotebookError
from mcp_joplin_notebooks.joplin_client import not_found
from mcp_joplin_notebooks.models import Kind


def new_id() -> str:
    return uuid.uuid4().hex


class FakeBackend:
    """Implements the ``BackendClient`` protocol over two dicts.

    ``calls`` records every request as ``(method, kind, detail)``. Entries in
    ``failures`` keyed by ``(method, item_id)`` or ``("fetch_page", page)``
    make the matching request raise.
    """

    def __init__(self) -> None:
        self.folders: dict[str, dict[str, Any]] = {}
        self.notes: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, Kind, Any]] = []
        self.failures: dict[tuple[str, Any], NotebookError] = {}

    # Seeding

    def add_folder(self, title: str, parent_id: str = "", *, folder_id: str | None = None) -> str:
        folder_id = folder_id or new_id()
        now = int(time.time() * 1000)
        self.folders[folder_id] = {
            "id": folder_id,
            "title": title,
            "parent_id": parent_id,
            "created_time": now,
            "updated_time": now,
        }
        return folder_id

    def add_note(
        self,
        title: str,
        parent_id: str = "",
        *,
        body: str = "",
        note_id: str | None = None,
        **extra: Any,
    ) -> str:
        note_id = note_id or new_id()
        now = int(time.time() * 1000)
        self.notes[note_id] = {
            "id": note_id,
            "title": title,
            "body": body,
            "parent_id": parent_id,
            "is_todo": 0,
            "todo_completed": 0,
            "todo_due": 0,
            "created_time": now,
            "updated_time": now,
            **extra,
        }
        return note_id

    @property
    def writes(self) -> list[tuple[str, Kind, Any]]:
        return [c for c in self.calls if c[0] in {"create", "update", "delete"}]

    # BackendClient

    def _store(self, kind: Kind) -> dict[str, dict[str, Any]]:
        return self.folders if kind is Kind.FOLDER else self.notes

    def _maybe_fail(self, method: str, key: Any) -> None:
        exc = self.failures.get((method, key))
        if exc is not None:
            raise exc

    @staticmethod
    def _project(record: dict[str, Any], fields: str) -> dict[str, Any]:
        wanted = [f.strip() for f in fields.split(",")]
        return {k: record[k] for k in wanted if k in record}

    async def fetch_one(self, kind: Kind, item_id: str, fields: str) -> dict[str, Any]:
        self.calls.append(("fetch_one", kind, item_id))
        self._maybe_fail("fetch_one", item_id)
        store = self._store(kind)
        if item_id not in store:
            raise not_found(kind, item_id)
        return self._project(store[item_id], fields)

    async def fetch_page(
        self,
        kind: Kind,
        *,
        fields: str,
        page: int = 1,
        limit: int = 100,
        parent_id: str | None = None,
        order_by: str | None = None,
        order_dir: str | None = None,
        query: str | None = None,
    ) -> dict[str, Any]:
        self.calls.append(("fetch_page", kind, page))
        self._maybe_fail("fetch_page", page)
        items = list(self._store(kind).values())
        if query is not None:
            needle = query.lower()
            items = [
                i for i in items
                if needle in i["title"].lower() or needle in (i.get("body") or "").lower()
            ]
        elif parent_id and kind is Kind.NOTE:
            if parent_id not in self.folders:
                raise not_found(Kind.FOLDER, parent_id)
            items = [i for i in items if i["parent_id"] == parent_id]
        if order_by:
            items.sort(key=lambda i: i.get(order_by) or 0, reverse=order_dir == "DESC")

        start = (page - 1) * limit
        chunk = items[start:start + limit]
        return {
            "items": [self._project(i, fields) for i in chunk],
            "has_more": start + limit < len(items),
        }

    async def create(self, kind: Kind, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", kind, dict(body)))
        self._maybe_fail("create", None)
        fields = dict(body)
        title = fields.pop("title", "")
        parent_id = fields.pop("parent_id", "")
        if kind is Kind.FOLDER:
            item_id = self.add_folder(title, parent_id)
        else:
            item_id = self.add_note(title, parent_id, body=fields.pop("body", ""), **fields)
        return dict(self._store(kind)[item_id])

    async def update(self, kind: Kind, item_id: str, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update", kind, (item_id, dict(body))))
        self._maybe_fail("update", item_id)
        store = self._store(kind)
        if item_id not in store:
            raise not_found(kind, item_id)
        store[item_id].update(body)
        store[item_id]["updated_time"] = int(time.time() * 1000)
        return dict(store[item_id])

    async def delete(self, kind: Kind, item_id: str) -> None:
        self.calls.append(("delete", kind, item_id))
        self._maybe_fail("delete", item_id)
        store = self._store(kind)
        if item_id not in store:
            raise not_found(kind, item_id)
        del store[item_id]
