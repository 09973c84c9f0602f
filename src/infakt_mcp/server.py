"""MCP stdio server exposing the inFakt tools."""

import asyncio
import sys
from typing import Any

import mcp.types as types
import structlog
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from infakt_mcp import __version__
from infakt_mcp.config import Settings, configure_logging, load_settings
from infakt_mcp.diagnostics import diagnostics_from_settings
from infakt_mcp.errors import ConfigurationError
from infakt_mcp.tools.definitions import ALL_TOOLS
from infakt_mcp.tools.executor import ToolExecutor
from infakt_mcp.tools.infakt_api import InFaktAPIClient

logger = structlog.get_logger(__name__)

SERVER_NAME = "infakt-mcp"


def list_tool_definitions() -> list[types.Tool]:
    """Convert the static tool table to MCP Tool objects."""
    return [
        types.Tool(
            name=tool["name"],
            description=tool["description"],
            inputSchema=tool["input_schema"],
        )
        for tool in ALL_TOOLS
    ]


async def call_tool_result(
    executor: ToolExecutor, name: str, arguments: dict[str, Any] | None
) -> types.CallToolResult:
    """Run a tool and wrap its text envelope for the MCP host."""
    result = await executor.execute(name, arguments or {})
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(executor: ToolExecutor) -> Server:
    """Build an MCP server whose tools are served by the executor."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return list_tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await call_tool_result(executor, name, arguments)

    return server


async def serve(settings: Settings) -> None:
    """Serve tools over stdio until the host closes the stream."""
    async with InFaktAPIClient(diagnostics=diagnostics_from_settings()) as client:
        server = create_server(ToolExecutor(client))
        async with stdio_server() as (read_stream, write_stream):
            logger.info("server_started", name=SERVER_NAME, api_url=settings.infakt_api_url)
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )


def main() -> None:
    """Console entry point."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_format)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
