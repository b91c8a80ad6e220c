"""
Output schema for schema-constrained generation, and the mapping from
decoded model output to IssueDraft.

The schema is built once at import time and frozen; call `as_request_schema`
to get a plain dict copy for the SDK.
"""

from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Mapping

from issue_drafter.core.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_TAGS,
    MISSING_DESCRIPTION,
    PRIORITY_CODES,
    UNTITLED_ISSUE,
)
from issue_drafter.core.models import IssueDraft

LOGGER = logging.getLogger(__name__)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


ISSUE_SCHEMA = _freeze(
    {
        "type": "OBJECT",
        "properties": {
            "title": {
                "type": "STRING",
                "description": "A clear, concise title for the issue",
            },
            "description": {
                "type": "STRING",
                "description": (
                    "A detailed description of the content formatted in Markdown. Use headings, lists, "
                    "bold, italics, and code blocks as appropriate to structure the content."
                ),
            },
            "priority": {
                "type": "STRING",
                "enum": ["P0", "P1", "P2", "P3"],
                "description": "Priority level: P0 (highest), P1 (high), P2 (medium), or P3 (low)",
            },
            "tags": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "min_items": 1,
                "max_items": 3,
                "description": "1-3 relevant tags for categorizing this issue",
            },
        },
        "required": ["title", "description", "priority", "tags"],
        "property_ordering": ["title", "description", "priority", "tags"],
    }
)

MULTI_ISSUE_SCHEMA = _freeze(
    {
        "type": "ARRAY",
        "description": (
            "An array of issues identified in the content. IMPORTANT: Balance consolidation with "
            "separation - group closely related problems with the same root cause into a single issue, "
            "but create separate issues for distinct problems with different causes or requiring "
            "different solutions. Keep issues focused and actionable."
        ),
        "items": _thaw(ISSUE_SCHEMA),
    }
)


def as_request_schema(schema: Mapping[str, Any] = MULTI_ISSUE_SCHEMA) -> dict[str, Any]:
    return _thaw(schema)


def map_priority_code(code: Any) -> int:
    """P0->0, P1->1, P3->3; anything else (including P2 or missing) -> 2."""
    if not isinstance(code, str):
        return DEFAULT_PRIORITY
    return PRIORITY_CODES.get(code.strip().upper(), DEFAULT_PRIORITY)


def _clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clean_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [str(t).strip() for t in value if t is not None and str(t).strip()]


# This is a function to map one schema-shaped object onto a draft, substituting defaults for blanks.
def map_schema_issue(obj: Mapping[str, Any]) -> IssueDraft:
    if not isinstance(obj, Mapping):
        raise ValueError(f"Expected an issue object, got {type(obj).__name__}")
    return IssueDraft(
        title=_clean_str(obj.get("title")) or UNTITLED_ISSUE,
        description=_clean_str(obj.get("description")) or MISSING_DESCRIPTION,
        priority=map_priority_code(obj.get("priority")),
        tags=_clean_tags(obj.get("tags")) or list(DEFAULT_TAGS),
    )


def decode_structured_issues(payload: Any) -> list[IssueDraft]:
    """
    Map decoded structured output to drafts in emission order.

    Accepts the array itself, a JSON string of it, or a single issue object.
    None and [] both mean "no issues found". Anything else raises ValueError.
    """
    if payload is None:
        return []
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)
    if isinstance(payload, Mapping):
        # Some responses wrap the array ({"issues": [...]}) or return one bare object.
        if isinstance(payload.get("issues"), list):
            payload = payload["issues"]
        else:
            payload = [payload]
    if not isinstance(payload, list):
        raise ValueError(f"Structured output is not an array of issues: {type(payload).__name__}")

    drafts = [map_schema_issue(item) for item in payload]
    LOGGER.debug("Decoded %d structured issue(s)", len(drafts))
    return drafts
