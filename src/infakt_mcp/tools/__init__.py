"""Tools module: inFakt API client, tool definitions and executor."""

from infakt_mcp.tools.definitions import ALL_TOOLS, TOOLS_BY_NAME
from infakt_mcp.tools.executor import ToolExecutor, ToolResult
from infakt_mcp.tools.infakt_api import InFaktAPIClient

__all__ = [
    # API Client
    "InFaktAPIClient",
    # Tool Definitions
    "ALL_TOOLS",
    "TOOLS_BY_NAME",
    # Tool Executor
    "ToolExecutor",
    "ToolResult",
]
