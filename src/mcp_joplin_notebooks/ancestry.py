"""Cycle checks for moving a folder under a new parent.

Joplin stores folders as a flat list of parent pointers and accepts any
``parent_id`` on update, so a move that would make a folder its own ancestor
has to be rejected here, before the write is sent. The check walks the
candidate parent's ancestor chain one request per hop.

The walk and the subsequent write are not atomic: a concurrent move made by
another client between the two can still introduce a cycle.
"""

from __future__ import annotations

import logging

from .errors import CircularReference, NotFound, ParentNotFound
from .models import Kind
from .ports import BackendClient

logger = logging.getLogger(__name__)

_HINT = "Use list_notebooks to inspect the folder hierarchy."


async def ensure_relocation_is_safe(
    client: BackendClient,
    folder_id: str,
    new_parent_id: str,
) -> list[str]:
    """Raise unless ``folder_id`` can be moved under ``new_parent_id``.

    Returns the ancestor chain of the new parent, nearest first.
    """
    if new_parent_id == folder_id:
        raise CircularReference(
            "A folder cannot be moved to itself.", identifier=folder_id, hint=_HINT
        )

    visited: set[str] = set()
    chain: list[str] = []
    current = new_parent_id
    while current:
        if current in visited:
            raise CircularReference(
                f'Circular reference detected in folder hierarchy at "{current}".',
                identifier=current,
                hint=_HINT,
            )
        if current == folder_id:
            raise CircularReference(
                f'Cannot move folder "{folder_id}" into its own descendant "{new_parent_id}".',
                identifier=folder_id,
                hint=_HINT,
            )
        visited.add(current)
        chain.append(current)

        try:
            folder = await client.fetch_one(Kind.FOLDER, current, "id,parent_id")
        except NotFound as exc:
            raise ParentNotFound(current) from exc
        current = folder.get("parent_id") or ""

    logger.debug("Moving %s under %s is safe (ancestors: %s)", folder_id, new_parent_id, chain)
    return chain
