from __future__ import annotations

import logging

from issue_drafter.core.constants import NO_PRIORITY
from issue_drafter.core.exceptions import SubmissionValidationError
from issue_drafter.core.models import IssueDraft
from issue_drafter.core.text_utils import build_submission_description, truncate
from issue_drafter.tracker.contracts import CreatedIssue, IssueCreateRequest, IssueTracker

LOGGER = logging.getLogger(__name__)


def build_create_request(
    draft: IssueDraft,
    *,
    team_id: str,
    priority: int | None = None,
    project_id: str | None = None,
    assignee_id: str | None = None,
    label_ids: list[str] | None = None,
    state_id: str | None = None,
) -> IssueCreateRequest:
    """
    Validate a reviewed draft and turn it into a tracker request.

    Tags are not tracker labels: they are appended to the description as a
    "**Tags:**" line. `priority` overrides the draft's and may be NO_PRIORITY (4).
    """
    if not (team_id or "").strip():
        raise SubmissionValidationError("Team ID is required")
    if not (draft.title or "").strip():
        raise SubmissionValidationError("Title is required")
    if not (draft.description or "").strip():
        raise SubmissionValidationError("Description is required")

    resolved_priority = draft.priority if priority is None else priority
    if isinstance(resolved_priority, bool) or resolved_priority not in range(0, NO_PRIORITY + 1):
        raise SubmissionValidationError(f"Priority must be between 0 and {NO_PRIORITY}, got {resolved_priority!r}")

    return IssueCreateRequest(
        team_id=team_id.strip(),
        title=draft.title.strip(),
        description=build_submission_description(draft.description, draft.tags),
        priority=resolved_priority,
        project_id=project_id or None,
        assignee_id=assignee_id or None,
        label_ids=[i for i in (label_ids or []) if i],
        state_id=state_id or None,
    )


def submit_draft(
    tracker: IssueTracker,
    draft: IssueDraft,
    *,
    team_id: str,
    priority: int | None = None,
    project_id: str | None = None,
    assignee_id: str | None = None,
    label_ids: list[str] | None = None,
    state_id: str | None = None,
) -> CreatedIssue:
    request = build_create_request(
        draft,
        team_id=team_id,
        priority=priority,
        project_id=project_id,
        assignee_id=assignee_id,
        label_ids=label_ids,
        state_id=state_id,
    )
    LOGGER.info(
        "Creating issue team=%s title=%r priority=%s tags=%d project=%s assignee=%s labels=%d state=%s",
        request.team_id,
        truncate(request.title, 50),
        request.priority,
        len(draft.tags),
        request.project_id or "none",
        request.assignee_id or "none",
        len(request.label_ids),
        request.state_id or "none",
    )
    created = tracker.create_issue(request)
    LOGGER.info("Created issue id=%s url=%s", created.id, created.url)
    return created
