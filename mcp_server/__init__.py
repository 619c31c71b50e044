"""MCP Server for the schema mapper

This package provides MCP tools for mapping database schemas.
"""

from mcp_server.handlers import SchemaHandler

__all__ = [
    "SchemaHandler",
]
