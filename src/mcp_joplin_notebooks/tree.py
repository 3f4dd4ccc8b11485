"""Notebook hierarchy built from Joplin's flat folder list."""

from __future__ import annotations

import locale
from collections.abc import Iterable

from .models import FolderNode, FolderRecord

ROOT = ""

# Titles such as "[0] Inbox" sort ahead of plain alphabetic ones.
_CHARACTER_BEFORE_A = chr(ord("A") - 1)


def sibling_sort_key(title: str) -> str:
    return locale.strxfrm(title.replace("[", _CHARACTER_BEFORE_A, 1))


def sort_siblings(folders: Iterable[FolderRecord]) -> list[FolderRecord]:
    return sorted(folders, key=lambda f: sibling_sort_key(f.title))


def group_by_parent(folders: Iterable[FolderRecord]) -> dict[str, list[FolderRecord]]:
    """Map each parent id to its sorted direct children.

    Root folders live under the empty key. A folder whose parent is not part of
    the collection is listed at the root rather than dropped.
    """
    folders = list(folders)
    known = {f.id for f in folders}
    by_parent: dict[str, list[FolderRecord]] = {}
    for f in folders:
        key = f.parent_id if f.parent_id in known else ROOT
        by_parent.setdefault(key, []).append(f)
    return {key: sort_siblings(children) for key, children in by_parent.items()}


def render_notebook_lines(
    by_parent: dict[str, list[FolderRecord]],
    *,
    indent_step: int = 2,
) -> list[str]:
    """Indented ``Notebook: ...`` lines, depth first from the root folders.

    Only follows the parent to children mapping forward, so folders caught in a
    parent cycle are never reached and nothing is emitted twice.
    """
    lines: list[str] = []

    def walk(parent_id: str, indent: int) -> None:
        for f in by_parent.get(parent_id, []):
            lines.append(f'{" " * indent}Notebook: "{f.title}" (notebook_id: "{f.id}")')
            walk(f.id, indent + indent_step)

    walk(ROOT, 0)
    return lines


def build_folder_nodes(by_parent: dict[str, list[FolderRecord]]) -> list[FolderNode]:
    def build(parent_id: str) -> list[FolderNode]:
        return [
            FolderNode(id=f.id, title=f.title, children=build(f.id))
            for f in by_parent.get(parent_id, [])
        ]

    return build(ROOT)
