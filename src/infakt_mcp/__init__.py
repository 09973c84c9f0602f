"""inFakt MCP - Model Context Protocol server for the inFakt invoicing API."""

__version__ = "0.1.0"

from infakt_mcp.config import configure_logging, get_settings
from infakt_mcp.tools import ALL_TOOLS, InFaktAPIClient, ToolExecutor

__all__ = [
    # Version
    "__version__",
    # Tools
    "InFaktAPIClient",
    "ToolExecutor",
    "ALL_TOOLS",
    # Config
    "get_settings",
    "configure_logging",
]
