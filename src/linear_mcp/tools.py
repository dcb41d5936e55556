"""MCP tool definitions for Linear.

This module provides the definitive list of tools exposed by the server. The
dispatcher also reads it to check required arguments before calling a handler.
"""
from typing import Optional

from mcp.types import Tool

DEFAULT_ISSUE_LIMIT = 50

PROJECT_STATES = ["planned", "started", "paused", "completed", "canceled"]


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Linear issue tracking."""
    return [
        # ============================================================================
        # Issue Tools
        # ============================================================================
        Tool(
            name="list_issues",
            description="List issues from Linear. Can filter by team, status, assignee, or search term.",
            inputSchema={
                "type": "object",
                "properties": {
                    "team": {
                        "type": "string",
                        "description": 'Team key (e.g., "ENG", "PROD")'
                    },
                    "status": {
                        "type": "string",
                        "description": 'Issue status (e.g., "Todo", "In Progress", "Done")'
                    },
                    "assignee": {
                        "type": "string",
                        "description": "Assignee email or name"
                    },
                    "search": {
                        "type": "string",
                        "description": "Search term to filter issues"
                    },
                    "limit": {
                        "type": "number",
                        "description": f"Maximum number of issues to return (default: {DEFAULT_ISSUE_LIMIT})"
                    }
                }
            }
        ),
        Tool(
            name="get_issue",
            description='Get details of a specific Linear issue by ID or identifier (e.g., "ENG-123")',
            inputSchema={
                "type": "object",
                "properties": {
                    "identifier": {
                        "type": "string",
                        "description": 'Issue identifier (e.g., "ENG-123") or ID'
                    }
                },
                "required": ["identifier"]
            }
        ),
        Tool(
            name="create_issue",
            description="Create a new issue in Linear",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "Issue title"
                    },
                    "description": {
                        "type": "string",
                        "description": "Issue description (supports markdown)"
                    },
                    "teamKey": {
                        "type": "string",
                        "description": 'Team key (e.g., "ENG", "PROD")'
                    },
                    "priority": {
                        "type": "number",
                        "description": "Priority (0=No priority, 1=Urgent, 2=High, 3=Normal, 4=Low)"
                    },
                    "assigneeEmail": {
                        "type": "string",
                        "description": "Email of the assignee"
                    }
                },
                "required": ["title", "teamKey"]
            }
        ),
        Tool(
            name="update_issue",
            description="Update an existing Linear issue",
            inputSchema={
                "type": "object",
                "properties": {
                    "identifier": {
                        "type": "string",
                        "description": 'Issue identifier (e.g., "ENG-123") or ID'
                    },
                    "title": {
                        "type": "string",
                        "description": "New title"
                    },
                    "description": {
                        "type": "string",
                        "description": "New description"
                    },
                    "status": {
                        "type": "string",
                        "description": 'New status name (e.g., "In Progress", "Done")'
                    },
                    "priority": {
                        "type": "number",
                        "description": "New priority (0-4)"
                    }
                },
                "required": ["identifier"]
            }
        ),
        # ============================================================================
        # Workspace Tools
        # ============================================================================
        Tool(
            name="list_teams",
            description="List all teams in the Linear workspace",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="list_projects",
            description="List projects in Linear",
            inputSchema={
                "type": "object",
                "properties": {
                    "team": {
                        "type": "string",
                        "description": "Filter by team key"
                    },
                    "status": {
                        "type": "string",
                        "description": f"Filter by status ({', '.join(PROJECT_STATES)})"
                    }
                }
            }
        ),
        Tool(
            name="get_user",
            description="Get information about the current user or a specific user",
            inputSchema={
                "type": "object",
                "properties": {
                    "email": {
                        "type": "string",
                        "description": "User email (optional, returns current user if not specified)"
                    }
                }
            }
        ),
    ]


def get_tool(name: str) -> Optional[Tool]:
    """Look up a tool definition by name."""
    for tool in get_tools():
        if tool.name == name:
            return tool
    return None


def required_arguments(name: str) -> list[str]:
    """Return the required argument names declared for a tool (empty if unknown)."""
    tool = get_tool(name)
    if tool is None:
        return []
    return list(tool.inputSchema.get("required", []))
