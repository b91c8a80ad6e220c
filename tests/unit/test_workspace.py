import threading

from issue_drafter.tracker.contracts import Label, Project, Team, User, WorkflowState
from issue_drafter.tracker.workspace import WorkspaceConfig, collect_workspace_data


class FakeTracker:
    def __init__(self, failing_team=None):
        self._failing_team = failing_team
        self.threads = set()

    def _seen(self):
        self.threads.add(threading.get_ident())

    def list_teams(self):
        return [Team(id="t1", name="Web", key="WEB"), Team(id="t2", name="API", key="API")]

    def list_users(self):
        return [User(id="u1", name="Ada", email="ada@example.com")]

    def list_projects(self, team_id):
        self._seen()
        return [Project(id=f"{team_id}-p", name="Roadmap")]

    def list_labels(self, team_id):
        self._seen()
        if team_id == self._failing_team:
            raise RuntimeError("labels unavailable")
        return [Label(id=f"{team_id}-l", name="bug", color="#f00")]

    def list_workflow_states(self, team_id):
        self._seen()
        return [WorkflowState(id=f"{team_id}-s", name="Todo", type="unstarted")]


def test_collects_per_team_data_in_team_order():
    data = collect_workspace_data(FakeTracker())
    assert [t.id for t in data.teams] == ["t1", "t2"]
    assert [u.id for u in data.users] == ["u1"]
    assert [td.team_id for td in data.teams_data] == ["t1", "t2"]
    web = data.for_team("t1")
    assert web.projects[0].id == "t1-p"
    assert web.labels[0].name == "bug"
    assert web.states[0].type == "unstarted"


def test_failed_team_degrades_to_empty_lists():
    data = collect_workspace_data(FakeTracker(failing_team="t2"))
    api = data.for_team("t2")
    assert api.projects == [] and api.labels == [] and api.states == []
    assert data.for_team("t1").labels


def test_single_worker_still_completes():
    data = collect_workspace_data(FakeTracker(), WorkspaceConfig(max_workers=1))
    assert len(data.teams_data) == 2
    assert data.for_team("missing") is None
