"""MCP tool definitions for ENML note operations.

This module imports all tool submodules to register them with the MCP server.
Each tool module uses the @mcp.tool() decorator to auto-register its tools.
"""

# Import all tool modules to register their @mcp.tool() decorated functions
from enml_notes.tools import store_tools
from enml_notes.tools import note_tools
from enml_notes.tools import search_tools
from enml_notes.tools import batch_tools

__all__ = [
    "store_tools",
    "note_tools",
    "search_tools",
    "batch_tools",
]
