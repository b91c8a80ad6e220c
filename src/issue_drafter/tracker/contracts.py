from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    key: str = ""


@dataclass(frozen=True)
class Project:
    id: str
    name: str


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str = ""
    avatar_url: str | None = None


@dataclass(frozen=True)
class Label:
    id: str
    name: str
    color: str = ""


@dataclass(frozen=True)
class WorkflowState:
    id: str
    name: str
    color: str = ""
    type: str = ""


@dataclass(frozen=True)
class IssueCreateRequest:
    """
    Payload for creating one issue. Optional fields are omitted when unset.
    """
    team_id: str
    title: str
    description: str
    priority: int = 2
    project_id: str | None = None
    assignee_id: str | None = None
    label_ids: list[str] = field(default_factory=list)
    state_id: str | None = None

    def to_input(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "teamId": self.team_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
        }
        if self.project_id:
            payload["projectId"] = self.project_id
        if self.assignee_id:
            payload["assigneeId"] = self.assignee_id
        if self.label_ids:
            payload["labelIds"] = list(self.label_ids)
        if self.state_id:
            payload["stateId"] = self.state_id
        return payload


@dataclass(frozen=True)
class CreatedIssue:
    id: str
    title: str
    url: str


class IssueTracker(Protocol):
    """
    Remote issue tracker the drafts are submitted to (Linear today, replaceable later).
    """

    def list_teams(self) -> list[Team]:
        ...

    def list_projects(self, team_id: str) -> list[Project]:
        ...

    def list_users(self) -> list[User]:
        ...

    def list_labels(self, team_id: str) -> list[Label]:
        ...

    def list_workflow_states(self, team_id: str) -> list[WorkflowState]:
        ...

    def create_issue(self, request: IssueCreateRequest) -> CreatedIssue:
        ...
