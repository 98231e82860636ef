"""ENML Notes MCP Server

ENML note creation and editing over the Model Context Protocol.
"""

from enml_notes.config import STORE_CONFIGURATION
from enml_notes.data_models import StoreMetadata, StoreConfiguration
from enml_notes.session import resolve_store, set_active_store, get_active_store
from enml_notes.server import mcp, run_server

# Import tools to register them with the MCP server
from enml_notes import tools  # noqa: F401

__version__ = "0.1.0"
__all__ = [
    "STORE_CONFIGURATION",
    "StoreMetadata",
    "StoreConfiguration",
    "resolve_store",
    "set_active_store",
    "get_active_store",
    "mcp",
    "run_server",
]
