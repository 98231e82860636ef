"""Search and discovery MCP tools.

This module provides MCP tool wrappers for finding notes:
- Search notes by text, tag and notebook
- List notebooks with note counts
- List tags with note counts
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from enml_notes.server import mcp
from enml_notes.config import STORE_CONFIGURATION
from enml_notes.session import open_store
from enml_notes.models import SearchNotesInput, ListNotebooksInput, ListTagsInput
from enml_notes.core.note_operations import search_notes, list_notebooks, list_tags
from enml_notes.core.note_store import NoteStore


async def run_search(store: NoteStore, request: SearchNotesInput) -> list[dict[str, Any]]:
    limit = request.limit if request.limit is not None else STORE_CONFIGURATION.settings.search_limit
    return await search_notes(
        store,
        request.query,
        notebook=request.notebook,
        limit=limit,
        return_mode=request.return_mode,
    )


@mcp.tool()
async def search_enml_notes(
    input: SearchNotesInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Search notes by title and body text, tags and notebook.

    Matching is case-insensitive. ``tag:<name>`` and ``notebook:<name>`` terms
    filter results; remaining words must all appear in the title or body.
    Results are ordered by last update, newest first.

    Args:
        input (SearchNotesInput): Validated input containing:
            - query (str): Search text, may be empty
            - notebook (str, optional): Restrict to one notebook
            - limit (int, optional): 1-500
            - return_mode (str): 'metadata' (default) or 'full'
            - store (str, optional): Store name (omit to use active store)

    Returns:
        {"count": int, "notes": [note metadata or full note]}

    Token Cost: 'metadata' ~60 tokens per note; 'full' adds the ENML body.

    Examples:
        - Use when: Looking up the GUID of a note by title
        - Workflow: search_enml_notes() → read_enml_note() / update_enml_note()
    """
    notes = await run_search(open_store(input.store, ctx), input)
    return {"count": len(notes), "notes": notes}


@mcp.tool()
async def list_enml_notebooks(
    input: ListNotebooksInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List notebooks in the store with their note counts.

    Returns:
        {"notebooks": [{"name": str, "note_count": int, "default": bool}]}
    """
    return {"notebooks": await list_notebooks(open_store(input.store, ctx))}


@mcp.tool()
async def list_enml_tags(
    input: ListTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List tags used in the store with their note counts.

    Returns:
        {"tags": [{"name": str, "note_count": int}]}
    """
    return {"tags": await list_tags(open_store(input.store, ctx))}
