"""Note management MCP tools.

This module provides MCP tool wrappers for note create/read/update/delete:
- Create notes from plain text or sanitized HTML, with attachments
- Read notes as ENML, display HTML, or metadata only
- Update notes with the replace, append, keep and search_replace edit modes
- Delete notes

The ``run_*`` helpers turn a validated input model into a core operation call
and are shared with the batch tool. All logic lives in
enml_notes.core.note_operations.
"""
from __future__ import annotations

from typing import Any, Optional

from mcp.server.fastmcp import Context

from enml_notes.server import mcp
from enml_notes.session import open_store
from enml_notes.models import (
    CreateNoteInput,
    ReadNoteInput,
    UpdateNoteInput,
    DeleteNoteInput,
)
from enml_notes.core.note_operations import (
    create_note,
    read_note,
    update_note,
    delete_note,
)
from enml_notes.core.note_store import NoteStore
from enml_notes.data_models import WorkItem


# ==============================================================================
# REQUEST RUNNERS
# ==============================================================================


async def run_create(
    store: NoteStore,
    request: CreateNoteInput,
    item: Optional[WorkItem] = None,
) -> dict[str, Any]:
    return await create_note(
        store,
        title=request.title,
        content=request.content,
        content_format=request.content_format,
        notebook=request.notebook,
        tags=request.tags,
        tag_mode=request.resolved_tag_mode(),
        attributes_json=request.attributes_json,
        attributes=request.attribute_fields(),
        attachments=request.build_attachments(item),
    )


async def run_read(store: NoteStore, request: ReadNoteInput) -> dict[str, Any]:
    return await read_note(store, request.guid, request.return_content)


async def run_update(
    store: NoteStore,
    request: UpdateNoteInput,
    item: Optional[WorkItem] = None,
) -> dict[str, Any]:
    return await update_note(
        store,
        request.guid,
        request.edit.to_edit(),
        title=request.title,
        notebook=request.notebook,
        tags=request.tags,
        tag_mode=request.resolved_tag_mode(),
        attributes_json=request.attributes_json,
        attributes=request.attribute_fields(),
        attachments=request.build_attachments(item),
    )


async def run_delete(store: NoteStore, request: DeleteNoteInput) -> dict[str, Any]:
    return await delete_note(store, request.guid)


# ==============================================================================
# READ OPERATIONS
# ==============================================================================

@mcp.tool()
async def read_enml_note(
    input: ReadNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Read a note by GUID.

    Args:
        input (ReadNoteInput): Validated input containing:
            - guid (str): Note GUID from create_enml_note() or search_enml_notes()
            - return_content (str): 'enml' (default), 'html' or 'none'
            - store (str, optional): Store name (omit to use active store)

    Returns:
        {
            "guid": str,
            "title": str,
            "notebook": str,
            "content": str,          # ENML document (omitted for 'none')
            "content_html": str,     # Only for 'html'
            "content_hash": str,
            "content_length": int,
            "tags": [str],
            "attributes": dict,
            "resources": [{"hash", "mime", "file_name", "size"}],
            "created": str,
            "updated": str
        }

    Examples:
        - Use when: Need the full note body
        - Use 'none': Only checking title, tags or attributes

    Error Handling:
        - Unknown GUID → [NOT_FOUND] error, use search_enml_notes()
    """
    return await run_read(open_store(input.store, ctx), input)


# ==============================================================================
# CREATE OPERATIONS
# ==============================================================================

@mcp.tool()
async def create_enml_note(
    input: CreateNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Create a note from plain text or HTML.

    Plain text is escaped and line breaks are kept. HTML is sanitized into
    ENML: disallowed elements are unwrapped (script and style are dropped with
    their content) and unsafe attributes and URLs are removed. Each attachment
    becomes a resource referenced by an <en-media> tag appended to the body.

    Args:
        input (CreateNoteInput): Validated input containing:
            - title (str): Note title
            - content (str): Plain text or HTML
            - content_format (str): 'plain_text' (default) or 'html'
            - notebook (str, optional): Notebook (omit to use the store default)
            - tags (list[str] | str, optional): Tag names
            - attributes_json / attributes (optional): Note attributes
            - attachments (list, optional): Base64 attachments
            - binary_property_names (str, optional): Which attachments to use
            - store (str, optional): Store name (omit to use active store)

    Returns:
        Created note metadata (same shape as read_enml_note with 'none').

    Error Handling:
        - ValidationError: Empty title, malformed attributes JSON, unknown attribute
        - InputError: binary_property_names names a missing attachment
    """
    return await run_create(open_store(input.store, ctx), input)


# ==============================================================================
# UPDATE OPERATIONS
# ==============================================================================

@mcp.tool()
async def update_enml_note(
    input: UpdateNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Update a note's content, title, notebook, tags and attributes.

    Content edit modes:
        - replace: New body from content (plain text or HTML)
        - append: Existing body followed by the new content
        - keep: Body unchanged (default)
        - search_replace: Replace every match of 'search' with literal
          'replacement'. Case-insensitive unless case_sensitive is set;
          'use_regex' treats search as a regular expression.

    Tag modes: 'replace' (default when tags are given), 'add', 'remove' and
    'ignore' (default otherwise).

    Args:
        input (UpdateNoteInput): Validated input containing:
            - guid (str): Note GUID
            - edit (dict): Edit mode, see above
            - title (str, optional): New title (omit to keep)
            - notebook (str, optional): Move to notebook
            - tags / tag_mode (optional): Tag changes
            - attributes_json / attributes (optional): Attribute changes
            - attachments / binary_property_names (optional): New resources
            - store (str, optional): Store name (omit to use active store)

    Returns:
        Updated note metadata.

    Examples:
        - Use when: "Add a line to my shopping list" → edit.mode='append'
        - Use when: "Rename TODO to DONE everywhere" → edit.mode='search_replace'
        - Use when: "Tag this note urgent" → tags=['urgent'], tag_mode='add'

    Error Handling:
        - InvalidPatternError: use_regex with a pattern that does not compile
        - [NOTE_LOCKED] error: Note is open elsewhere; close it and retry
        - [NOT_FOUND] error: Unknown GUID
    """
    return await run_update(open_store(input.store, ctx), input)


# ==============================================================================
# DELETE OPERATIONS
# ==============================================================================

@mcp.tool()
async def delete_enml_note(
    input: DeleteNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Delete a note permanently.

    Returns:
        {"success": True, "guid": str}

    Error Handling:
        - [NOT_FOUND] error: Unknown GUID
        - [NOTE_LOCKED] error: Note is open elsewhere
    """
    return await run_delete(open_store(input.store, ctx), input)
