"""Pydantic schemas for tool responses.

Field names are snake_case; aliases carry the camelCase keys emitted in tool
output (``createdAt``, ``startDate``, ...). Dump with ``by_alias=True``.
"""
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class IssueView(BaseModel):
    """Compact issue projection returned by list_issues and get_issue."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    identifier: str
    title: str
    description: Optional[str] = None
    status: Optional[str] = None  # Workflow state name
    priority: Optional[int] = None
    assignee: Optional[str] = None  # Assignee display name
    team: Optional[str] = None  # Team key
    url: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class TeamView(BaseModel):
    id: str
    key: str
    name: str
    description: Optional[str] = None


class ProjectView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    state: Optional[str] = None
    url: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    target_date: Optional[str] = Field(None, alias="targetDate")


class UserView(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None


class CreatedIssue(BaseModel):
    """Identity of a newly created issue."""

    id: Optional[str] = None
    identifier: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None


class CreateIssueResult(BaseModel):
    success: bool = True
    issue: CreatedIssue


class UpdateIssueResult(BaseModel):
    success: bool = True
    message: str
