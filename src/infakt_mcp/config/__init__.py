"""Configuration module for the inFakt MCP server."""

from infakt_mcp.config.logging import configure_logging
from infakt_mcp.config.settings import Settings, get_settings, load_settings

__all__ = ["Settings", "get_settings", "load_settings", "configure_logging"]
