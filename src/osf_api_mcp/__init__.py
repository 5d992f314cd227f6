"""MCP server for searching the OSF API documentation."""

__version__ = "1.0.0"
