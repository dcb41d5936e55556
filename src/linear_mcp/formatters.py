"""Shared formatting functions for MCP responses.

Projections take raw Linear GraphQL nodes (plain dicts) and reduce them to the
small, stable set of fields each tool returns. They do no I/O.
"""
import json
from typing import Any, Optional

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel

from .schemas import (
    CreatedIssue,
    CreateIssueResult,
    IssueView,
    ProjectView,
    TeamView,
    UpdateIssueResult,
    UserView,
)


def _nested(node: dict, key: str, field: str) -> Optional[Any]:
    """Return node[key][field], or None when the relation is unset."""
    related = node.get(key)
    return related.get(field) if related else None


def format_issue(issue: dict) -> IssueView:
    """Project an issue node to its view."""
    return IssueView(
        id=issue["id"],
        identifier=issue["identifier"],
        title=issue["title"],
        description=issue.get("description"),
        status=_nested(issue, "state", "name"),
        priority=issue.get("priority"),
        assignee=_nested(issue, "assignee", "name"),
        team=_nested(issue, "team", "key"),
        url=issue.get("url"),
        created_at=issue.get("createdAt"),
        updated_at=issue.get("updatedAt"),
    )


def format_team(team: dict) -> TeamView:
    return TeamView(
        id=team["id"],
        key=team["key"],
        name=team["name"],
        description=team.get("description"),
    )


def format_project(project: dict) -> ProjectView:
    return ProjectView(
        id=project["id"],
        name=project["name"],
        description=project.get("description"),
        state=project.get("state"),
        url=project.get("url"),
        start_date=project.get("startDate"),
        target_date=project.get("targetDate"),
    )


def format_user(user: dict) -> UserView:
    return UserView(
        id=user["id"],
        name=user.get("name"),
        email=user.get("email"),
        active=user.get("active"),
    )


def format_created_issue(issue: Optional[dict]) -> CreateIssueResult:
    """Wrap the created issue node; a missing node still reports success with empty fields."""
    issue = issue or {}
    return CreateIssueResult(
        issue=CreatedIssue(
            id=issue.get("id"),
            identifier=issue.get("identifier"),
            title=issue.get("title"),
            url=issue.get("url"),
        )
    )


def format_update(identifier: str) -> UpdateIssueResult:
    return UpdateIssueResult(message=f"Issue {identifier} updated")


def to_json(payload: BaseModel | list[BaseModel]) -> str:
    """Serialize a view (or list of views) as indented JSON."""
    if isinstance(payload, list):
        data = [item.model_dump(by_alias=True) for item in payload]
    else:
        data = payload.model_dump(by_alias=True)
    return json.dumps(data, indent=2)


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def error_result(text: str) -> CallToolResult:
    """Build a failed tool result carrying a human-readable message."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)
