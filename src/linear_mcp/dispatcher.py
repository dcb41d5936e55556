"""Tool dispatch and error containment.

``ToolDispatcher.invoke`` is the single boundary where handler failures are
turned into error results; handlers themselves never catch.
"""
from typing import Any, Awaitable, Callable, Optional
import logging
import traceback

import httpx
from mcp.types import CallToolResult

from . import formatters
from . import handlers
from . import tools
from .client import LinearAPIError, LinearClient

logger = logging.getLogger("linear-mcp.dispatcher")

Handler = Callable[[dict, LinearClient], Awaitable[CallToolResult]]

# Map tool names to handler functions
HANDLERS: dict[str, Handler] = {
    # Issue handlers
    "list_issues": handlers.handle_list_issues,
    "get_issue": handlers.handle_get_issue,
    "create_issue": handlers.handle_create_issue,
    "update_issue": handlers.handle_update_issue,
    # Workspace handlers
    "list_teams": handlers.handle_list_teams,
    "list_projects": handlers.handle_list_projects,
    "get_user": handlers.handle_get_user,
}


class ToolDispatcher:
    """Route tool calls to handlers against an injected Linear client."""

    def __init__(self, client: LinearClient):
        self.client = client

    async def invoke(self, name: str, arguments: Optional[dict[str, Any]] = None) -> CallToolResult:
        """Run the named tool and return its result.

        Never raises: unknown tools, missing required arguments and any
        exception from the handler or the Linear API come back as results
        with ``isError=True``.
        """
        arguments = dict(arguments or {})
        logger.info(f"Tool call: {name} with arguments: {arguments}")

        handler = HANDLERS.get(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return formatters.error_result(f"Unknown tool: {name}")

        missing = [arg for arg in tools.required_arguments(name) if arguments.get(arg) is None]
        if missing:
            logger.warning(f"Tool {name} called without required arguments: {missing}")
            return formatters.error_result(f"Missing required argument(s): {', '.join(missing)}")

        try:
            return await handler(arguments, self.client)

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during {name} call:")
            logger.error(f"  Status: {e.response.status_code}")
            logger.error(f"  URL: {e.request.url}")
            logger.error(f"  Response text: {e.response.text}")
            return formatters.error_result(f"Error: {e}")

        except httpx.RequestError as e:
            logger.error(f"Request error during {name} call:")
            logger.error(f"  Error type: {type(e).__name__}")
            logger.error(f"  Error message: {str(e)}")
            return formatters.error_result(f"Error: {e}")

        except LinearAPIError as e:
            logger.error(f"Linear API error during {name} call: {e}")
            return formatters.error_result(f"Error: {e}")

        except Exception as e:
            logger.error(f"Unexpected error during {name} call:")
            logger.error(f"  Error type: {type(e).__name__}")
            logger.error(f"  Error message: {str(e)}")
            logger.error(f"  Arguments: {arguments}")
            logger.error(f"  Traceback:\n{traceback.format_exc()}")
            return formatters.error_result(f"Error: {e}")
