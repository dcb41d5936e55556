"""Linear MCP Server - Expose Linear issue tracking to AI assistants."""
import sys
import asyncio
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from . import __version__
from . import tools
from .client import LinearClient
from .config import ConfigurationError, Settings, get_settings
from .dispatcher import ToolDispatcher


# Configure logging to stderr; stdout carries the MCP protocol
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr,
    force=True
)
logger = logging.getLogger("linear-mcp")

SERVER_NAME = "linear-mcp-server"


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build the MCP server instance with tool listing and dispatch wired in."""
    app = Server(SERVER_NAME, version=__version__)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for Linear."""
        return tools.get_tools()

    @app.call_tool()
    async def call_tool(name: str, arguments: Any) -> CallToolResult:
        """Handle MCP tool calls by delegating to the dispatcher."""
        return await dispatcher.invoke(name, arguments)

    return app


async def main(settings: Optional[Settings] = None):
    """Run the MCP server over stdio until the client disconnects."""
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(f"MCP Server starting with LINEAR_API_URL: {settings.linear_api_url}")

    async with LinearClient(
        api_key=settings.linear_api_key,
        api_url=settings.linear_api_url,
        timeout=settings.request_timeout,
    ) as client:
        app = create_server(ToolDispatcher(client))
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Linear MCP server running on stdio")
            await app.run(read_stream, write_stream, app.create_initialization_options())


def run():
    """Console entry point. Exits with status 1 on missing configuration or fatal errors."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Linear MCP server stopped")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
