"""Session state management for active note store selection."""

from typing import Dict, Optional
from mcp.server.fastmcp import Context

from enml_notes.config import STORE_CONFIGURATION
from enml_notes.core.note_store import LocalNoteStore
from enml_notes.data_models import StoreMetadata

# Session state storage
_ACTIVE_STORES: Dict[int, str] = {}


def get_session_key(ctx: Context) -> int:
    """Produce a stable per-session key for active store tracking.

    The value is derived from the identity of the underlying session object and
    stays stable for the lifetime of the MCP session.
    """
    return id(ctx.session)


def set_active_store(ctx: Context, store_name: str) -> StoreMetadata:
    """Set the active note store for a client session.

    Raises:
        ValueError: If ``store_name`` is not present in the configuration.
    """
    metadata = STORE_CONFIGURATION.get(store_name)
    _ACTIVE_STORES[get_session_key(ctx)] = metadata.name
    return metadata


def get_active_store(ctx: Context) -> StoreMetadata:
    """Retrieve the active store for a session, falling back to the default."""
    store_name = _ACTIVE_STORES.get(get_session_key(ctx), STORE_CONFIGURATION.default_store)
    return STORE_CONFIGURATION.get(store_name)


def resolve_store(store: Optional[str], ctx: Optional[Context] = None) -> StoreMetadata:
    """Resolve which store metadata should be used for an operation.

    Args:
        store: Optional store name provided directly by the caller.
        ctx: Optional FastMCP context used to infer the active store when ``store``
            is not supplied.

    Raises:
        ValueError: If the supplied ``store`` name is not recognized.
    """
    if store:
        return STORE_CONFIGURATION.get(store)

    if ctx is not None:
        return get_active_store(ctx)

    return STORE_CONFIGURATION.get(STORE_CONFIGURATION.default_store)


def open_store(store: Optional[str], ctx: Optional[Context] = None) -> LocalNoteStore:
    """Return a note store client for the resolved store."""
    return LocalNoteStore(resolve_store(store, ctx))
