"""FastMCP server definition (tools + resources)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from mcp.server.fastmcp import Context, FastMCP

from .formatting import render_outcome
from .joplin_client import JoplinClient
from .models import FolderNode
from .operations import NotebookService
from .settings import Settings


@dataclass(slots=True)
class AppContext:
    settings: Settings
    joplin: JoplinClient
    notebooks: NotebookService


def _notebooks(ctx: Context) -> NotebookService:
    app: AppContext = ctx.request_context.lifespan_context
    return app.notebooks


def create_mcp_server(settings: Settings) -> FastMCP:
    @asynccontextmanager
    async def lifespan(_: FastMCP) -> AsyncIterator[AppContext]:
        joplin = JoplinClient(
            base_url=str(settings.joplin_base_url),
            token=settings.joplin_token,
            timeout_seconds=settings.http_timeout_seconds,
        )
        try:
            yield AppContext(
                settings=settings,
                joplin=joplin,
                notebooks=NotebookService(joplin, page_size=settings.page_size),
            )
        finally:
            await joplin.aclose()

    mcp = FastMCP(
        "Joplin",
        instructions=(
            "Browse and edit Joplin notebooks via the local Joplin Data API (Web Clipper). "
            "Start with list_notebooks to discover notebook IDs, then read or modify "
            "notebooks and notes by ID."
        ),
        lifespan=lifespan,
        # Configure Streamable HTTP behavior (FastMCP.streamable_http_app() no longer accepts these
        # as parameters in newer mcp versions).
        stateless_http=True,
        json_response=True,
    )

    @mcp.resource("joplin-note://{note_id}")
    async def read_note_resource(note_id: str, ctx: Context) -> str:
        """Read a note with its metadata."""
        return render_outcome(await _notebooks(ctx).read_note(note_id))

    @mcp.resource("joplin-folders://tree")
    async def read_folders_tree_resource(ctx: Context) -> list[FolderNode]:
        """Return the full folder tree."""
        return await _notebooks(ctx).folder_tree()

    @mcp.tool()
    async def list_notebooks(ctx: Context) -> str:
        """Retrieve the complete notebook hierarchy from Joplin."""
        return render_outcome(await _notebooks(ctx).list_notebook_tree())

    @mcp.tool()
    async def folders_tree(ctx: Context) -> list[FolderNode]:
        """Return the notebook hierarchy as nested nodes."""
        return await _notebooks(ctx).folder_tree()

    @mcp.tool()
    async def read_notebook(notebook_id: str, ctx: Context) -> str:
        """Read the contents of a specific notebook."""
        return render_outcome(await _notebooks(ctx).read_notebook(notebook_id))

    @mcp.tool()
    async def read_note(note_id: str, ctx: Context) -> str:
        """Read the full content of a specific note."""
        return render_outcome(await _notebooks(ctx).read_note(note_id))

    @mcp.tool()
    async def read_multinote(note_ids: list[str], ctx: Context) -> str:
        """Read the full content of multiple notes at once."""
        return render_outcome(await _notebooks(ctx).read_notes(note_ids))

    @mcp.tool()
    async def search_notes(query: str, ctx: Context) -> str:
        """Search for notes in Joplin and return matching notebooks."""
        return render_outcome(await _notebooks(ctx).search_notes(query))

    @mcp.tool()
    async def get_all_notes(
        ctx: Context,
        folder_id: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        order_by: str | None = None,
        order_dir: str | None = None,
    ) -> str:
        """List notes one page at a time, optionally within a folder."""
        return render_outcome(
            await _notebooks(ctx).list_notes(folder_id, page, limit, order_by, order_dir)
        )

    @mcp.tool()
    async def get_folder(folder_id: str, ctx: Context) -> str:
        """Show a folder's location, sub-folders and recent notes."""
        return render_outcome(await _notebooks(ctx).get_folder(folder_id))

    @mcp.tool()
    async def create_note(
        title: str,
        ctx: Context,
        body: str | None = None,
        parent_id: str | None = None,
        is_todo: bool | None = None,
        todo_due: int | None = None,
    ) -> str:
        """Create a new note (or todo) in a notebook."""
        return render_outcome(
            await _notebooks(ctx).create_note(title, body, parent_id, is_todo, todo_due)
        )

    @mcp.tool()
    async def update_note(
        note_id: str,
        ctx: Context,
        title: str | None = None,
        body: str | None = None,
        parent_id: str | None = None,
        is_todo: bool | None = None,
        todo_completed: bool | None = None,
        todo_due: int | None = None,
    ) -> str:
        """Update only the supplied fields of an existing note."""
        return render_outcome(
            await _notebooks(ctx).update_note(
                note_id, title, body, parent_id, is_todo, todo_completed, todo_due
            )
        )

    @mcp.tool()
    async def delete_note(note_id: str, ctx: Context) -> str:
        """Move a note to the trash."""
        return render_outcome(await _notebooks(ctx).delete_note(note_id))

    @mcp.tool()
    async def create_folder(title: str, ctx: Context, parent_id: str | None = None) -> str:
        """Create a new folder (notebook), optionally inside another one."""
        return render_outcome(await _notebooks(ctx).create_folder(title, parent_id))

    @mcp.tool()
    async def update_folder(
        folder_id: str,
        ctx: Context,
        title: str | None = None,
        parent_id: str | None = None,
    ) -> str:
        """Rename a folder and/or move it under another folder."""
        return render_outcome(await _notebooks(ctx).update_folder(folder_id, title, parent_id))

    @mcp.tool()
    async def delete_folder(folder_id: str, ctx: Context) -> str:
        """Move a folder and everything in it to the trash."""
        return render_outcome(await _notebooks(ctx).delete_folder(folder_id))

    return mcp
