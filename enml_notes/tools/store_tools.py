"""MCP tools for note store management."""

import logging
from typing import Any
from mcp.server.fastmcp import Context

from enml_notes.server import mcp
from enml_notes.models import ListStoresInput, SetActiveStoreInput
from enml_notes.config import STORE_CONFIGURATION
from enml_notes.session import (
    set_active_store as set_active_store_session,
    get_active_store,
    get_session_key,
)

logger = logging.getLogger(__name__)


@mcp.tool()
async def list_note_stores(
    input: ListStoresInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List configured note stores and current session state.

    Primary entry point for store discovery.

    Args:
        input (ListStoresInput): Validated input (no fields required)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "default": str,    # System default store name
            "active": str,     # Currently active store (or None)
            "stores": [
                {
                    "name": str,
                    "path": str,
                    "description": str,
                    "default_notebook": str,
                    "exists": bool
                }
            ]
        }

    Error Handling:
        - Config file missing → Error with expected config path
        - Invalid config format → Error describing expected YAML structure
    """
    active = None
    if ctx is not None:
        try:
            active = get_active_store(ctx).name
        except ValueError:
            active = None

    payload = STORE_CONFIGURATION.as_payload()
    payload["active"] = active
    return payload


@mcp.tool()
async def set_active_note_store(
    input: SetActiveStoreInput,
    ctx: Context,
) -> dict[str, Any]:
    """Set the active note store for this conversation session.

    All subsequent tool calls that omit the store parameter will use the
    active store. Session state persists for the conversation lifetime.

    Args:
        input (SetActiveStoreInput): Validated input containing:
            - store (str): Store name from stores.yaml
        ctx (Context): FastMCP context for session state

    Returns:
        {"store": str, "path": str, "status": "active"}

    Error Handling:
        - Unknown store → Error, suggest list_note_stores()
    """
    metadata = set_active_store_session(ctx, input.store)
    logger.info("Active store for session %s set to '%s'", get_session_key(ctx), metadata.name)
    return {
        "store": metadata.name,
        "path": str(metadata.path),
        "status": "active",
    }
