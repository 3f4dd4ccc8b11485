"""Fetch whole collections from Joplin's paginated list endpoints."""

from __future__ import annotations

import logging
from typing import Any

from .errors import UnexpectedResponseShape
from .models import FolderRecord, Kind, parse_record
from .ports import BackendClient

logger = logging.getLogger(__name__)

FOLDER_FIELDS = "id,title,parent_id"


async def fetch_collection(
    client: BackendClient,
    kind: Kind,
    *,
    fields: str,
    parent_id: str | None = None,
    page_size: int = 100,
) -> list[dict[str, Any]]:
    """Return every item of a collection, in backend order.

    Pages are requested until the backend stops reporting ``has_more``. A
    failing page propagates its error; a partial collection is never returned.
    """
    items: list[dict[str, Any]] = []
    page = 1
    while True:
        raw = await client.fetch_page(
            kind, fields=fields, page=page, limit=page_size, parent_id=parent_id
        )
        page_items = raw.get("items")
        if not isinstance(page_items, list):
            raise UnexpectedResponseShape(
                f"Page {page} of {kind.path} has no list of items.",
                identifier=parent_id,
            )
        items.extend(page_items)
        if not raw.get("has_more"):
            break
        page += 1

    logger.debug("Fetched %d items from %s in %d page(s)", len(items), kind.path, page)
    return items


async def fetch_folder_records(client: BackendClient, *, page_size: int = 100) -> list[FolderRecord]:
    raw = await fetch_collection(client, Kind.FOLDER, fields=FOLDER_FIELDS, page_size=page_size)
    return [parse_record(FolderRecord, item, "listing folders") for item in raw]
