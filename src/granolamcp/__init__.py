"""Read-only MCP server over Granola's local cache."""

__version__ = "0.1.0"
