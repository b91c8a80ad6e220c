import pytest

from issue_drafter.core.exceptions import SubmissionValidationError
from issue_drafter.core.models import IssueDraft
from issue_drafter.tracker.contracts import CreatedIssue
from issue_drafter.tracker.submission import build_create_request, submit_draft

DRAFT = IssueDraft(title="Fix login", description="Users cannot log in.", priority=1, tags=["auth", "bug"])


class RecordingTracker:
    def __init__(self):
        self.requests = []

    def create_issue(self, request):
        self.requests.append(request)
        return CreatedIssue(id="ISS-1", title=request.title, url="https://tracker.example/ISS-1")


def test_tags_appended_to_description():
    request = build_create_request(DRAFT, team_id="team-1")
    assert request.description == "Users cannot log in.\n\n**Tags:** auth, bug"
    assert request.priority == 1


def test_no_tags_leaves_description_alone():
    request = build_create_request(DRAFT.with_changes(tags=[" ", ""]), team_id="team-1")
    assert request.description == "Users cannot log in."


def test_optional_fields_only_sent_when_set():
    payload = build_create_request(DRAFT, team_id="team-1").to_input()
    assert set(payload) == {"teamId", "title", "description", "priority"}

    payload = build_create_request(
        DRAFT, team_id="team-1", project_id="p", assignee_id="u", label_ids=["l1", ""], state_id="s"
    ).to_input()
    assert payload["projectId"] == "p"
    assert payload["assigneeId"] == "u"
    assert payload["labelIds"] == ["l1"]
    assert payload["stateId"] == "s"


def test_priority_override_allows_no_priority():
    assert build_create_request(DRAFT, team_id="t", priority=4).priority == 4
    with pytest.raises(SubmissionValidationError):
        build_create_request(DRAFT, team_id="t", priority=5)


@pytest.mark.parametrize(
    ("draft", "team_id"),
    [
        (DRAFT, ""),
        (DRAFT.with_changes(title="  "), "t"),
        (DRAFT.with_changes(description=""), "t"),
    ],
)
def test_validation_errors(draft, team_id):
    with pytest.raises(SubmissionValidationError):
        build_create_request(draft, team_id=team_id)


def test_submit_draft_calls_tracker_once():
    tracker = RecordingTracker()
    created = submit_draft(tracker, DRAFT, team_id="team-1", state_id="todo")
    assert created.url.endswith("ISS-1")
    (request,) = tracker.requests
    assert request.state_id == "todo"
    assert request.title == "Fix login"


def test_reviewer_edits_validate_priority():
    with pytest.raises(ValueError):
        DRAFT.with_changes(priority=4)
    assert DRAFT.with_changes(tags=["  ui ", ""]).tags == ["ui"]


def test_submit_draft_forwards_every_option():
    tracker = RecordingTracker()
    submit_draft(
        tracker, DRAFT, team_id="team-1", priority=4, project_id="p", assignee_id="u", label_ids=["l1"], state_id="s"
    )
    (request,) = tracker.requests
    assert request.to_input() == {
        "teamId": "team-1",
        "title": "Fix login",
        "description": "Users cannot log in.\n\n**Tags:** auth, bug",
        "priority": 4,
        "projectId": "p",
        "assigneeId": "u",
        "labelIds": ["l1"],
        "stateId": "s",
    }


def test_submit_draft_rejects_unknown_options():
    with pytest.raises(TypeError):
        submit_draft(RecordingTracker(), DRAFT, team_id="team-1", projectid="p")
