"""Port between the notebook operations and the note-storage backend."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .models import Kind


@runtime_checkable
class BackendClient(Protocol):
    """What the notebook operations need from the note-storage backend.

    Every call may raise ``NotFound``, ``BackendUnavailable``, ``BackendError``
    or ``UnexpectedResponseShape``.
    """

    async def fetch_one(self, kind: Kind, item_id: str, fields: str) -> dict[str, Any]:
        ...

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
        """Return one page as ``{"items": [...], "has_more": bool}``.

        ``parent_id`` restricts a note listing to one folder and is only valid
        for ``Kind.NOTE``; ``query`` switches to full-text search.
        """
        ...

    async def create(self, kind: Kind, body: dict[str, Any]) -> dict[str, Any]:
        ...

    async def update(self, kind: Kind, item_id: str, body: dict[str, Any]) -> dict[str, Any]:
        ...

    async def delete(self, kind: Kind, item_id: str) -> None:
        ...
