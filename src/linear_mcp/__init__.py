"""Linear MCP Server - Model Context Protocol integration for Linear.

This package exposes Linear issue tracking to AI assistants as MCP tools.

Modules:
- server: stdio MCP server implementation
- tools: MCP tool definitions
- dispatcher: tool name to handler dispatch and error containment
- handlers: Tool implementation handlers
- formatters: Response formatting utilities
- client: Linear GraphQL API client
- config: Environment-based settings
"""

__version__ = "1.0.0"

from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
