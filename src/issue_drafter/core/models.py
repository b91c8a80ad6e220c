from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Union

from issue_drafter.core.constants import DRAFT_PRIORITIES


class ContentKind(str, enum.Enum):
    IMAGE = "image"
    PDF = "pdf"
    TEXT = "text"


@dataclass(frozen=True)
class IssueDraft:
    """
    A normalized issue produced by the analyzer, prior to submission to any tracker.

    priority uses the tracker scale: 0=Urgent, 1=High, 2=Medium, 3=Low.
    """

    title: str
    description: str
    priority: int = 2
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.priority, bool) or self.priority not in DRAFT_PRIORITIES:
            raise ValueError(f"priority must be one of 0-3, got {self.priority!r}")

    # This is a function to apply reviewer edits while keeping the draft immutable.
    def with_changes(self, **changes: Any) -> IssueDraft:
        if "tags" in changes and changes["tags"] is not None:
            changes["tags"] = [str(t).strip() for t in changes["tags"] if str(t).strip()]
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class AnalysisContent:
    """
    Content handed to the analyzer: binary payload + MIME type, or raw text.
    Build instances through issue_drafter.core.datasource.
    """

    kind: ContentKind
    data: bytes | None = None
    mime_type: str | None = None
    text: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.kind is not ContentKind.TEXT


@dataclass(frozen=True)
class StructuredAnalysis:
    """Drafts decoded from schema-constrained model output."""

    drafts: list[IssueDraft]

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class FreeTextAnalysis:
    """Drafts recovered by the free-text parser, plus the text it parsed."""

    drafts: list[IssueDraft]
    raw_text: str

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class FailedAnalysis:
    """The model call failed; drafts holds exactly one synthetic error draft."""

    drafts: list[IssueDraft]
    error: str

    @property
    def is_error(self) -> bool:
        return True


AnalysisResult = Union[StructuredAnalysis, FreeTextAnalysis, FailedAnalysis]
