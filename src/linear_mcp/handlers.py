"""MCP tool handlers for Linear.

All handlers follow a consistent pattern:
- Accept: arguments dict and a LinearClient (or a stand-in with the same coroutines)
- Resolve human-friendly keys (team key, email, status name) to Linear IDs first
- Issue one primary read or write call
- Return: CallToolResult built with the formatters module

Handlers do not catch exceptions; the dispatcher converts anything raised here
into an error result. Lookups that do not resolve are skipped, not reported, and
are logged as warnings.
"""
from typing import Optional
import logging

from mcp.types import CallToolResult

from . import formatters
from .client import LinearClient
from .tools import DEFAULT_ISSUE_LIMIT

logger = logging.getLogger("linear-mcp.handlers")


# ============================================================================
# Lookup Helpers
# ============================================================================

def find_user_by_email(users: list[dict], email: str) -> Optional[dict]:
    """Return the first user whose email equals ``email`` exactly."""
    return next((u for u in users if u.get("email") == email), None)


def find_user_by_fragment(users: list[dict], fragment: str) -> Optional[dict]:
    """Return the first user whose email or name contains ``fragment``, ignoring case."""
    needle = fragment.lower()
    for user in users:
        email = (user.get("email") or "").lower()
        name = (user.get("name") or "").lower()
        if needle in email or needle in name:
            return user
    return None


def find_state_by_name(states: list[dict], name: str) -> Optional[dict]:
    """Return the workflow state named exactly ``name``."""
    return next((s for s in states if s.get("name") == name), None)


async def build_issue_filter(arguments: dict, client: LinearClient) -> Optional[dict]:
    """Fold the resolvable list_issues arguments into an IssueFilter.

    Returns None when no filter applies.
    """
    filters: dict = {}

    team_key = arguments.get("team")
    if team_key:
        team = await client.team_by_key(team_key)
        if team:
            filters["team"] = {"key": {"eq": team_key}}
        else:
            logger.warning(f"Team {team_key} not found, listing issues without team filter")

    status = arguments.get("status")
    if status:
        filters["state"] = {"name": {"eq": status}}

    assignee = arguments.get("assignee")
    if assignee:
        user = find_user_by_fragment(await client.users(), assignee)
        if user:
            filters["assignee"] = {"id": {"eq": user["id"]}}
        else:
            logger.warning(f"No user matches assignee '{assignee}', listing issues without assignee filter")

    search = arguments.get("search")
    if search:
        filters["searchableContent"] = {"contains": search}

    return filters or None


async def build_project_filter(arguments: dict, client: LinearClient) -> Optional[dict]:
    """Fold the resolvable list_projects arguments into a ProjectFilter."""
    filters: dict = {}

    team_key = arguments.get("team")
    if team_key:
        team = await client.team_by_key(team_key)
        if team:
            filters["accessibleTeams"] = {"some": {"key": {"eq": team_key}}}
        else:
            logger.warning(f"Team {team_key} not found, listing projects without team filter")

    status = arguments.get("status")
    if status:
        filters["state"] = {"eq": status}

    return filters or None


# ============================================================================
# Issue Handlers
# ============================================================================

async def handle_list_issues(arguments: dict, client: LinearClient) -> CallToolResult:
    """List issues, optionally filtered by team, status, assignee and search term.

    Filters that do not resolve (unknown team key, no matching assignee) are
    dropped and the query runs without them. ``limit`` is the page size.
    """
    issue_filter = await build_issue_filter(arguments, client)
    limit = int(arguments.get("limit") or DEFAULT_ISSUE_LIMIT)

    issues = await client.issues(filter=issue_filter, first=limit)
    logger.info(f"Successfully listed {len(issues)} issues")

    return formatters.text_result(formatters.to_json([formatters.format_issue(i) for i in issues]))


async def handle_get_issue(arguments: dict, client: LinearClient) -> CallToolResult:
    """Get one issue by identifier (e.g. "ENG-123") or UUID."""
    identifier = arguments["identifier"]
    issue = await client.issue(identifier)
    if not issue:
        logger.info(f"Issue {identifier} not found")
        return formatters.error_result(f"Issue {identifier} not found")

    logger.info(f"Successfully retrieved issue {issue['identifier']}")
    return formatters.text_result(formatters.to_json(formatters.format_issue(issue)))


async def handle_create_issue(arguments: dict, client: LinearClient) -> CallToolResult:
    """Create an issue in the team identified by ``teamKey``.

    An ``assigneeEmail`` with no exact match creates the issue unassigned.
    """
    team_key = arguments["teamKey"]
    team = await client.team_by_key(team_key)
    if not team:
        logger.info(f"Team {team_key} not found")
        return formatters.error_result(f"Team {team_key} not found")

    payload = {"title": arguments["title"], "teamId": team["id"]}
    if arguments.get("description") is not None:
        payload["description"] = arguments["description"]
    if arguments.get("priority") is not None:
        payload["priority"] = int(arguments["priority"])

    assignee_email = arguments.get("assigneeEmail")
    if assignee_email:
        user = find_user_by_email(await client.users(), assignee_email)
        if user:
            payload["assigneeId"] = user["id"]
        else:
            logger.warning(f"No user with email {assignee_email}, creating issue unassigned")

    issue = await client.create_issue(payload)
    result = formatters.format_created_issue(issue)
    logger.info(f"Successfully created issue {result.issue.identifier} in team {team_key}")

    return formatters.text_result(formatters.to_json(result))


async def handle_update_issue(arguments: dict, client: LinearClient) -> CallToolResult:
    """Apply a partial update to an issue.

    ``title`` and ``description`` are applied only when non-empty. ``priority``
    is applied whenever given, including 0 (no priority). ``status`` is matched
    by exact name against the issue team's workflow states.
    """
    identifier = arguments["identifier"]
    issue = await client.issue(identifier)
    if not issue:
        logger.info(f"Issue {identifier} not found")
        return formatters.error_result(f"Issue {identifier} not found")

    update: dict = {}
    if arguments.get("title"):
        update["title"] = arguments["title"]
    if arguments.get("description"):
        update["description"] = arguments["description"]
    if arguments.get("priority") is not None:
        update["priority"] = int(arguments["priority"])

    status = arguments.get("status")
    if status:
        team = issue.get("team")
        states = await client.workflow_states(team["id"]) if team else []
        state = find_state_by_name(states, status)
        if state:
            update["stateId"] = state["id"]
        else:
            logger.warning(f"Status '{status}' not found for issue {identifier}, leaving state unchanged")

    await client.update_issue(issue["id"], update)
    logger.info(f"Successfully updated issue {identifier}: {sorted(update)}")

    return formatters.text_result(formatters.to_json(formatters.format_update(identifier)))


# ============================================================================
# Workspace Handlers
# ============================================================================

async def handle_list_teams(arguments: dict, client: LinearClient) -> CallToolResult:
    """List all teams in the workspace."""
    teams = await client.teams()
    logger.info(f"Successfully listed {len(teams)} teams")
    return formatters.text_result(formatters.to_json([formatters.format_team(t) for t in teams]))


async def handle_list_projects(arguments: dict, client: LinearClient) -> CallToolResult:
    """List projects, optionally filtered by team key and project state."""
    project_filter = await build_project_filter(arguments, client)
    projects = await client.projects(filter=project_filter)
    logger.info(f"Successfully listed {len(projects)} projects")
    return formatters.text_result(formatters.to_json([formatters.format_project(p) for p in projects]))


async def handle_get_user(arguments: dict, client: LinearClient) -> CallToolResult:
    """Get a user by exact email, or the authenticated user when no email is given."""
    email = arguments.get("email")
    if email:
        user = find_user_by_email(await client.users(), email)
        if not user:
            logger.info(f"User with email {email} not found")
            return formatters.error_result(f"User with email {email} not found")
    else:
        user = await client.viewer()

    logger.info(f"Successfully retrieved user {user['id']}")
    return formatters.text_result(formatters.to_json(formatters.format_user(user)))
