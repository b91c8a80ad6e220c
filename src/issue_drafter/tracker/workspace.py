from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from issue_drafter.tracker.contracts import IssueTracker, Label, Project, Team, User, WorkflowState

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamData:
    """
    Projects, labels and workflow states of one team. Empty when the fetch failed.
    """
    team_id: str
    projects: list[Project] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    states: list[WorkflowState] = field(default_factory=list)


@dataclass(frozen=True)
class WorkspaceData:
    teams: list[Team]
    users: list[User]
    teams_data: list[TeamData]

    def for_team(self, team_id: str) -> TeamData | None:
        return next((t for t in self.teams_data if t.team_id == team_id), None)


@dataclass(frozen=True)
class WorkspaceConfig:
    max_workers: int = 4


def _fetch_team_data(tracker: IssueTracker, pool: ThreadPoolExecutor, team: Team) -> TeamData:
    projects = pool.submit(tracker.list_projects, team.id)
    labels = pool.submit(tracker.list_labels, team.id)
    states = pool.submit(tracker.list_workflow_states, team.id)
    try:
        return TeamData(
            team_id=team.id,
            projects=list(projects.result()),
            labels=list(labels.result()),
            states=list(states.result()),
        )
    except Exception:
        LOGGER.exception("Error fetching data for team %s; continuing with empty lists", team.name)
        return TeamData(team_id=team.id)


def collect_workspace_data(tracker: IssueTracker, config: WorkspaceConfig | None = None) -> WorkspaceData:
    """
    Fetch teams and users, then fan out per team for projects, labels and states.

    Per-team calls run concurrently and have no ordering dependency. A team whose
    fetch fails is still listed, with empty data; failures of list_teams() or
    list_users() propagate.
    """
    config = config or WorkspaceConfig()
    teams = list(tracker.list_teams())
    users = list(tracker.list_users())

    # Team workers block on call futures, so the two must not share a pool.
    with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as calls:
        with ThreadPoolExecutor(max_workers=max(1, min(config.max_workers, len(teams) or 1))) as per_team:
            futures = [per_team.submit(_fetch_team_data, tracker, calls, team) for team in teams]
            teams_data = [f.result() for f in futures]

    LOGGER.info("Loaded workspace data: teams=%d users=%d", len(teams), len(users))
    return WorkspaceData(teams=teams, users=users, teams_data=teams_data)
