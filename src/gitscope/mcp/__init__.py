"""MCP request boundary for history browsing."""

from gitscope.mcp.context import AppContext
from gitscope.mcp.errors import ErrorResponse, MCPError, MCPErrorCode
from gitscope.mcp.generations import SearchGenerations
from gitscope.mcp.server import ToolResponse, create_mcp_server, run_server

__all__ = [
    "AppContext",
    "ErrorResponse",
    "MCPError",
    "MCPErrorCode",
    "SearchGenerations",
    "ToolResponse",
    "create_mcp_server",
    "run_server",
]
