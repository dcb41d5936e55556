"""Shared fixtures: an in-memory stand-in for LinearClient."""
import copy
from typing import Optional

import httpx
import pytest

from linear_mcp.dispatcher import ToolDispatcher


class FakeLinearClient:
    """In-memory Linear workspace with the same coroutine surface as LinearClient.

    Issue filters are evaluated for the keys the handlers emit, and every write
    is recorded so tests can assert on the exact payload.
    """

    def __init__(self):
        self.teams_data = [
            {"id": "team-eng", "key": "ENG", "name": "Engineering", "description": "Core platform"},
            {"id": "team-prod", "key": "PROD", "name": "Product", "description": None},
        ]
        self.users_data = [
            {"id": "user-jane", "name": "Jane Smith", "email": "jsmith@x.com", "active": True},
            {"id": "user-doe", "name": "John Doe", "email": "jane.doe@x.com", "active": True},
            {"id": "user-bob", "name": "Bob Stone", "email": "bob@x.com", "active": False},
        ]
        self.viewer_data = {"id": "user-bob", "name": "Bob Stone", "email": "bob@x.com", "active": False}
        self.states = {
            "team-eng": [
                {"id": "state-todo", "name": "Todo", "type": "unstarted"},
                {"id": "state-progress", "name": "In Progress", "type": "started"},
                {"id": "state-done", "name": "Done", "type": "completed"},
            ],
        }
        self.issues_data = [
            {
                "id": "issue-123",
                "identifier": "ENG-123",
                "title": "Crash on login",
                "description": "Stack trace attached",
                "priority": 2,
                "url": "https://linear.app/acme/issue/ENG-123",
                "createdAt": "2024-01-02T10:00:00.000Z",
                "updatedAt": "2024-01-03T10:00:00.000Z",
                "state": {"id": "state-todo", "name": "Todo"},
                "assignee": {"id": "user-jane", "name": "Jane Smith", "email": "jsmith@x.com"},
                "team": {"id": "team-eng", "key": "ENG", "name": "Engineering"},
            },
            {
                "id": "issue-7",
                "identifier": "PROD-7",
                "title": "Pricing page copy",
                "description": None,
                "priority": 0,
                "url": "https://linear.app/acme/issue/PROD-7",
                "createdAt": "2024-02-01T10:00:00.000Z",
                "updatedAt": "2024-02-01T10:00:00.000Z",
                "state": {"id": "state-p-done", "name": "Done"},
                "assignee": None,
                "team": {"id": "team-prod", "key": "PROD", "name": "Product"},
            },
        ]
        self.projects_data = [
            {
                "id": "proj-1",
                "name": "Auth revamp",
                "description": "SSO and MFA",
                "state": "started",
                "url": "https://linear.app/acme/project/auth-revamp",
                "startDate": "2024-01-01",
                "targetDate": "2024-03-31",
                "teamKeys": ["ENG"],
            },
            {
                "id": "proj-2",
                "name": "Launch site",
                "description": None,
                "state": "planned",
                "url": "https://linear.app/acme/project/launch-site",
                "startDate": None,
                "targetDate": None,
                "teamKeys": ["PROD"],
            },
        ]
        self.calls: list[tuple] = []
        self.created: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.last_issue_filter: Optional[dict] = None
        self.last_issue_limit: Optional[int] = None
        self.last_project_filter: Optional[dict] = None
        self.fail_with: Optional[Exception] = None

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    async def team_by_key(self, key: str):
        self._record("team_by_key", key)
        return next((copy.deepcopy(t) for t in self.teams_data if t["key"] == key), None)

    async def teams(self):
        self._record("teams")
        return copy.deepcopy(self.teams_data)

    async def workflow_states(self, team_id: str):
        self._record("workflow_states", team_id)
        return copy.deepcopy(self.states.get(team_id, []))

    async def users(self):
        self._record("users")
        return copy.deepcopy(self.users_data)

    async def viewer(self):
        self._record("viewer")
        return copy.deepcopy(self.viewer_data)

    async def issue(self, identifier: str):
        self._record("issue", identifier)
        for issue in self.issues_data:
            if identifier in (issue["id"], issue["identifier"]):
                return copy.deepcopy(issue)
        return None

    async def issues(self, filter=None, first=50):
        self._record("issues", filter, first)
        self.last_issue_filter = filter
        self.last_issue_limit = first
        return [copy.deepcopy(i) for i in self.issues_data if _issue_matches(i, filter or {})][:first]

    async def create_issue(self, input: dict):
        self._record("create_issue", input)
        self.created.append(input)
        team = next(t for t in self.teams_data if t["id"] == input["teamId"])
        number = 200 + len(self.created)
        identifier = f"{team['key']}-{number}"
        return {
            "id": f"issue-new-{number}",
            "identifier": identifier,
            "title": input["title"],
            "url": f"https://linear.app/acme/issue/{identifier}",
        }

    async def update_issue(self, issue_id: str, input: dict):
        self._record("update_issue", issue_id, input)
        self.updates.append((issue_id, input))
        return True

    async def projects(self, filter=None):
        self._record("projects", filter)
        self.last_project_filter = filter
        filter = filter or {}
        result = []
        for project in self.projects_data:
            if "state" in filter and project["state"] != filter["state"]["eq"]:
                continue
            if "accessibleTeams" in filter and filter["accessibleTeams"]["some"]["key"]["eq"] not in project["teamKeys"]:
                continue
            result.append({k: v for k, v in project.items() if k != "teamKeys"})
        return result


def _issue_matches(issue: dict, filter: dict) -> bool:
    if "team" in filter and (issue.get("team") or {}).get("key") != filter["team"]["key"]["eq"]:
        return False
    if "state" in filter and (issue.get("state") or {}).get("name") != filter["state"]["name"]["eq"]:
        return False
    if "assignee" in filter and (issue.get("assignee") or {}).get("id") != filter["assignee"]["id"]["eq"]:
        return False
    if "searchableContent" in filter:
        needle = filter["searchableContent"]["contains"].lower()
        haystack = f"{issue['title']} {issue.get('description') or ''}".lower()
        if needle not in haystack:
            return False
    return True


@pytest.fixture
def fake_client():
    return FakeLinearClient()


@pytest.fixture
def dispatcher(fake_client):
    return ToolDispatcher(fake_client)


@pytest.fixture
def network_error():
    request = httpx.Request("POST", "https://api.linear.app/graphql")
    return httpx.ConnectError("Connection refused", request=request)
