from __future__ import annotations

from collections import Counter

from mcp_joplin_notebooks.models import FolderRecord
from mcp_joplin_notebooks.tree import (
    ROOT,
    build_folder_nodes,
    group_by_parent,
    render_notebook_lines,
    sort_siblings,
)


def folder(fid: str, title: str, parent: str = "") -> FolderRecord:
    return FolderRecord(id=fid, title=title, parent_id=parent)


def test_bracketed_titles_sort_first() -> None:
    siblings = [folder("1", "[0] A"), folder("2", "Z"), folder("3", "[1] B")]
    assert [f.title for f in sort_siblings(siblings)] == ["[0] A", "[1] B", "Z"]


def test_group_by_parent_partitions_every_folder_once() -> None:
    folders = [
        folder("a", "Work"),
        folder("b", "Home"),
        folder("c", "Projects", "a"),
        folder("d", "Archive", "c"),
        folder("e", "Recipes", "b"),
    ]
    by_parent = group_by_parent(folders)

    grouped = [f.id for children in by_parent.values() for f in children]
    assert sorted(grouped) == ["a", "b", "c", "d", "e"]
    assert [f.id for f in by_parent[ROOT]] == ["b", "a"]
    assert [f.id for f in by_parent["c"]] == ["d"]


def test_render_visits_each_folder_once_with_indent() -> None:
    folders = [
        folder("a", "Work"),
        folder("c", "Projects", "a"),
        folder("d", "Archive", "c"),
        folder("b", "Home"),
    ]
    lines = render_notebook_lines(group_by_parent(folders))

    assert lines == [
        'Notebook: "Home" (notebook_id: "b")',
        'Notebook: "Work" (notebook_id: "a")',
        '  Notebook: "Projects" (notebook_id: "c")',
        '    Notebook: "Archive" (notebook_id: "d")',
    ]
    ids = Counter(line.rsplit('"', 2)[1] for line in lines)
    assert set(ids.values()) == {1}


def test_custom_indent_step() -> None:
    lines = render_notebook_lines(
        group_by_parent([folder("a", "Top"), folder("b", "Child", "a")]), indent_step=4
    )
    assert lines[1].startswith('    Notebook: "Child"')


def test_dangling_parent_is_listed_at_root() -> None:
    folders = [folder("a", "Orphan", "missing"), folder("b", "Root")]
    by_parent = group_by_parent(folders)

    assert {f.id for f in by_parent[ROOT]} == {"a", "b"}
    assert len(render_notebook_lines(by_parent)) == 2


def test_render_is_inert_to_cycles_in_data() -> None:
    folders = [
        folder("r", "Root"),
        folder("x", "X", "y"),
        folder("y", "Y", "x"),
        folder("s", "Self", "s"),
    ]
    lines = render_notebook_lines(group_by_parent(folders))
    assert lines == ['Notebook: "Root" (notebook_id: "r")']


def test_build_folder_nodes_nests_children() -> None:
    nodes = build_folder_nodes(
        group_by_parent([folder("a", "Top"), folder("b", "Child", "a"), folder("c", "[0] First", "a")])
    )
    assert len(nodes) == 1
    assert nodes[0].id == "a"
    assert [n.title for n in nodes[0].children] == ["[0] First", "Child"]


def test_empty_collection_renders_nothing() -> None:
    assert render_notebook_lines(group_by_parent([])) == []
