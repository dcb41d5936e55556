"""Async client for the Linear GraphQL API.

All Linear API calls go through a single GraphQL endpoint. The client owns one
httpx.AsyncClient carrying the API key, and returns plain dicts (GraphQL nodes)
so handlers can project them without knowing about the transport.
"""
from typing import Any, Optional
import logging

import httpx

from .config import DEFAULT_API_URL

logger = logging.getLogger("linear-mcp.client")

USERS_PAGE_SIZE = 100
TEAMS_PAGE_SIZE = 100


class LinearAPIError(Exception):
    """GraphQL-level error reported by the Linear API."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__("; ".join(messages) or "Unknown Linear API error")


# ============================================================================
# GraphQL documents
# ============================================================================

_ISSUE_FIELDS = """
    id
    identifier
    title
    description
    priority
    url
    createdAt
    updatedAt
    state { id name }
    assignee { id name email }
    team { id key name }
"""

_TEAM_BY_KEY_QUERY = """
query TeamByKey($key: String!) {
  teams(filter: { key: { eq: $key } }, first: 1) {
    nodes { id key name description }
  }
}
"""

_TEAMS_QUERY = """
query Teams($first: Int!, $after: String) {
  teams(first: $first, after: $after) {
    nodes { id key name description }
    pageInfo { hasNextPage endCursor }
  }
}
"""

_USERS_QUERY = """
query Users($first: Int!, $after: String) {
  users(first: $first, after: $after) {
    nodes { id name email active }
    pageInfo { hasNextPage endCursor }
  }
}
"""

_VIEWER_QUERY = """
query Viewer {
  viewer { id name email active }
}
"""

_ISSUE_QUERY = """
query Issue($id: String!) {
  issue(id: $id) {%s}
}
""" % _ISSUE_FIELDS

_ISSUES_QUERY = """
query Issues($filter: IssueFilter, $first: Int!) {
  issues(filter: $filter, first: $first) {
    nodes {%s}
  }
}
""" % _ISSUE_FIELDS

_CREATE_ISSUE_MUTATION = """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue { id identifier title url }
  }
}
"""

_UPDATE_ISSUE_MUTATION = """
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {
  issueUpdate(id: $id, input: $input) {
    success
  }
}
"""

_WORKFLOW_STATES_QUERY = """
query TeamStates($id: String!) {
  team(id: $id) {
    states { nodes { id name type } }
  }
}
"""

_PROJECTS_QUERY = """
query Projects($filter: ProjectFilter) {
  projects(filter: $filter) {
    nodes { id name description state url startDate targetDate }
  }
}
"""


class LinearClient:
    """Linear GraphQL API client.

    Use as an async context manager so the underlying connection pool is
    closed on exit:

        async with LinearClient(api_key) as client:
            teams = await client.teams()
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url
        self._http = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "LinearClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _execute(self, query: str, variables: Optional[dict] = None) -> dict[str, Any]:
        """Post a GraphQL document and return its ``data`` object.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            LinearAPIError: If the response carries GraphQL errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = await self._http.post(self._api_url, json=payload)
        response.raise_for_status()
        body = response.json()

        if body.get("errors"):
            messages = [err.get("message", str(err)) for err in body["errors"]]
            raise LinearAPIError(messages)

        return body.get("data") or {}

    async def _paginate(self, query: str, field: str, page_size: int) -> list[dict]:
        """Walk a Relay connection to its last page and return all nodes."""
        nodes: list[dict] = []
        after = None
        while True:
            data = await self._execute(query, {"first": page_size, "after": after})
            connection = data[field]
            nodes.extend(connection["nodes"])
            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                return nodes
            after = page_info["endCursor"]

    # --- Teams ---

    async def team_by_key(self, key: str) -> Optional[dict]:
        data = await self._execute(_TEAM_BY_KEY_QUERY, {"key": key})
        nodes = data["teams"]["nodes"]
        return nodes[0] if nodes else None

    async def teams(self) -> list[dict]:
        return await self._paginate(_TEAMS_QUERY, "teams", TEAMS_PAGE_SIZE)

    async def workflow_states(self, team_id: str) -> list[dict]:
        data = await self._execute(_WORKFLOW_STATES_QUERY, {"id": team_id})
        team = data.get("team")
        if not team:
            return []
        return team["states"]["nodes"]

    # --- Users ---

    async def users(self) -> list[dict]:
        """Return every user in the workspace."""
        users = await self._paginate(_USERS_QUERY, "users", USERS_PAGE_SIZE)
        logger.debug(f"Fetched {len(users)} users")
        return users

    async def viewer(self) -> dict:
        data = await self._execute(_VIEWER_QUERY)
        return data["viewer"]

    # --- Issues ---

    async def issue(self, identifier: str) -> Optional[dict]:
        """Fetch an issue by UUID or human identifier (e.g. "ENG-123").

        Returns None when Linear reports the entity does not exist.
        """
        try:
            data = await self._execute(_ISSUE_QUERY, {"id": identifier})
        except LinearAPIError as e:
            if any(msg.lower().startswith("entity not found") for msg in e.messages):
                return None
            raise
        return data.get("issue")

    async def issues(self, filter: Optional[dict] = None, first: int = 50) -> list[dict]:
        variables: dict[str, Any] = {"first": first}
        if filter:
            variables["filter"] = filter
        data = await self._execute(_ISSUES_QUERY, variables)
        return data["issues"]["nodes"]

    async def create_issue(self, input: dict) -> Optional[dict]:
        """Create an issue and return the created node (id, identifier, title, url)."""
        data = await self._execute(_CREATE_ISSUE_MUTATION, {"input": input})
        return data["issueCreate"].get("issue")

    async def update_issue(self, issue_id: str, input: dict) -> bool:
        data = await self._execute(_UPDATE_ISSUE_MUTATION, {"id": issue_id, "input": input})
        return bool(data["issueUpdate"]["success"])

    # --- Projects ---

    async def projects(self, filter: Optional[dict] = None) -> list[dict]:
        variables = {"filter": filter} if filter else None
        data = await self._execute(_PROJECTS_QUERY, variables)
        return data["projects"]["nodes"]
