"""Batch processing MCP tool.

Runs an ordered list of work items against one store. Each item is validated
with the same input model as the matching single-note tool and may reference
its own binary payloads by name.
"""
from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context

from enml_notes.server import mcp
from enml_notes.config import STORE_CONFIGURATION
from enml_notes.session import open_store
from enml_notes.models import (
    CreateNoteInput,
    ReadNoteInput,
    UpdateNoteInput,
    DeleteNoteInput,
    SearchNotesInput,
    RunBatchInput,
)
from enml_notes.core.note_operations import ItemHandler, ItemResult, process_batch
from enml_notes.core.note_store import NoteStore
from enml_notes.data_models import WorkItem
from enml_notes.tools.note_tools import run_create, run_delete, run_read, run_update
from enml_notes.tools.search_tools import run_search

logger = logging.getLogger(__name__)


def make_item_handler(store: NoteStore) -> ItemHandler:
    """Return a handler that dispatches work items to note operations on ``store``."""

    async def handle(item: WorkItem) -> ItemResult:
        parameters = {key: value for key, value in item.json.items() if key not in ("operation", "store")}
        operation = item.json.get("operation")

        if operation == "create":
            return await run_create(store, CreateNoteInput.model_validate(parameters), item)
        if operation == "read":
            return await run_read(store, ReadNoteInput.model_validate(parameters))
        if operation == "update":
            return await run_update(store, UpdateNoteInput.model_validate(parameters), item)
        if operation == "delete":
            return await run_delete(store, DeleteNoteInput.model_validate(parameters))
        if operation == "search":
            return await run_search(store, SearchNotesInput.model_validate(parameters))
        raise ValueError(f"Unsupported batch operation '{operation}'")

    return handle


@mcp.tool()
async def run_enml_batch(
    input: RunBatchInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Run several note operations in one call, one item at a time.

    Each item names an operation ('create', 'read', 'update', 'delete',
    'search') and its parameters, which use the same fields as the matching
    tool. Attachments are supplied per item in 'binary' and picked with
    'binary_property_names'.

    Args:
        input (RunBatchInput): Validated input containing:
            - items (list): Work items, in order
            - continue_on_fail (bool, optional): Keep going after a failed item
            - store (str, optional): Store name (omit to use active store)

    Returns:
        {
            "results": [
                {"json": dict, "paired_item": int},                 # success
                {"json": dict, "error": dict, "paired_item": int}   # failure
            ]
        }

    Error Handling:
        - Without continue_on_fail the first failure stops the batch and is
          reported with its item index. Earlier items stay applied.
    """
    continue_on_fail = input.continue_on_fail
    if continue_on_fail is None:
        continue_on_fail = STORE_CONFIGURATION.settings.continue_on_fail

    store = open_store(input.store, ctx)
    items = [entry.to_work_item() for entry in input.items]
    logger.info("Running batch of %d item(s) (continue_on_fail=%s)", len(items), continue_on_fail)

    results = await process_batch(items, make_item_handler(store), continue_on_fail=continue_on_fail)
    return {"results": results}
