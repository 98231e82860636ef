"""Core ENML transformation and note editing logic, independent of MCP."""
