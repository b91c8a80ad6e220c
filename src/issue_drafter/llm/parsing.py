"""
Best-effort parser for free-text model output.

Used when the model cannot be held to the output schema. It recognises
"ISSUE <n>:" blocks containing TITLE / DESCRIPTION / PRIORITY / TAGS lines
and tolerates missing fields; it is not a general grammar.
"""

from __future__ import annotations

import logging
import re

from issue_drafter.core.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_TAGS,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_URGENT,
    REVIEW_TAGS,
)
from issue_drafter.core.models import IssueDraft
from issue_drafter.core.text_utils import truncate

LOGGER = logging.getLogger(__name__)

NO_ISSUES_MARKER = "NO ISSUES FOUND"
UNTITLED_SENTINEL = "AI-Generated Issue"
NO_DESCRIPTION = "No description provided by AI"
CONTENT_ANALYSIS_TITLE = "Content Analysis"

TITLE_LIMIT = 50
MIN_BLOCK_LENGTH = 30

_FIELD_NAMES = ("TITLE", "DESCRIPTION", "PRIORITY", "TAGS")

# Labels may be wrapped in Markdown: "- **Title:** ...", "### Title: ...".
_LABEL_PREFIX = r"^[ \t]*(?:[-*>#]+[ \t]*)?[*_]*"
_LABEL_SUFFIX = r"[*_]*[ \t]*:[*_]*[ \t]*"

_ISSUE_MARKER = re.compile(r"ISSUE\s*\d+\s*:", re.IGNORECASE)
# Lead-in ends at an "ISSUE 1:" on the first line, or at a line starting with "ISSUE 1:" or "TITLE:".
_PREAMBLE = re.compile(
    r"\A(?:[^\n]*?(?=ISSUE\s*1\s*:)|[\s\S]*?(?="
    + _LABEL_PREFIX
    + r"(?:ISSUE\s*1\s*:|TITLE"
    + _LABEL_SUFFIX
    + r")))",
    re.IGNORECASE | re.MULTILINE,
)
_ANY_FIELD = re.compile(_LABEL_PREFIX + r"(?:" + "|".join(_FIELD_NAMES) + r")" + _LABEL_SUFFIX, re.IGNORECASE | re.MULTILINE)


def _field_line(name: str) -> re.Pattern[str]:
    return re.compile(_LABEL_PREFIX + name + _LABEL_SUFFIX + r"(.*)$", re.IGNORECASE | re.MULTILINE)


_TITLE_LINE = _field_line("TITLE")
_PRIORITY_LINE = _field_line("PRIORITY")
_TAGS_LINE = _field_line("TAGS")
_DESCRIPTION_START = re.compile(_LABEL_PREFIX + "DESCRIPTION" + _LABEL_SUFFIX, re.IGNORECASE | re.MULTILINE)
_STRIPPED_FIELDS = (_TITLE_LINE, _PRIORITY_LINE, _TAGS_LINE)


def _field_value(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip().strip("*_").strip()
    return value or None


def has_field_markers(text: str) -> bool:
    return bool(_ISSUE_MARKER.search(text) or _ANY_FIELD.search(text))


def map_priority_text(value: str | None) -> int:
    """
    Map loose priority wording to the tracker scale.

    Substring match, checked in order: P0/CRITICAL/HIGHEST/URGENT -> 0,
    P1/HIGH -> 1, P3/LOW -> 3. Everything else, including None, is 2.
    """
    if not value:
        return DEFAULT_PRIORITY
    upper = value.strip().upper()
    if any(token in upper for token in ("P0", "CRITICAL", "HIGHEST", "URGENT")):
        return PRIORITY_URGENT
    if "P1" in upper or "HIGH" in upper:
        return PRIORITY_HIGH
    if "P3" in upper or "LOW" in upper:
        return PRIORITY_LOW
    return DEFAULT_PRIORITY


def extract_title(block: str) -> str:
    value = _field_value(_TITLE_LINE, block)
    if value:
        return value

    first_line = next((line.strip() for line in block.splitlines() if line.strip()), "")
    if len(first_line) > 5 and ":" not in first_line:
        return truncate(first_line, TITLE_LIMIT)
    return UNTITLED_SENTINEL


def extract_description(block: str) -> str:
    start = _DESCRIPTION_START.search(block)
    if start:
        rest = block[start.end():]
        end = _ANY_FIELD.search(rest)
        value = (rest[: end.start()] if end else rest).strip()
        if value:
            return value

    remaining = block
    for pattern in _STRIPPED_FIELDS:
        remaining = pattern.sub("", remaining, count=1)
    remaining = remaining.strip()
    return remaining or NO_DESCRIPTION


def extract_tags(block: str) -> list[str]:
    value = _field_value(_TAGS_LINE, block)
    if not value:
        return list(DEFAULT_TAGS)
    tags = [t.strip().strip("`#").strip() for t in value.split(",")]
    return [t for t in tags if t] or list(DEFAULT_TAGS)


def parse_issue_block(block: str) -> IssueDraft:
    """Extract one draft from a block; the title may be the UNTITLED_SENTINEL."""
    return IssueDraft(
        title=extract_title(block),
        description=extract_description(block),
        priority=map_priority_text(_field_value(_PRIORITY_LINE, block)),
        tags=extract_tags(block),
    )


def _content_analysis_draft(text: str) -> IssueDraft:
    return IssueDraft(
        title=CONTENT_ANALYSIS_TITLE,
        description=text.strip(),
        priority=DEFAULT_PRIORITY,
        tags=list(REVIEW_TAGS),
    )


def parse_issues_response(text: str | None) -> list[IssueDraft]:
    """
    Parse a free-text model response into zero or more drafts, in emission order.

    Titles are returned unformatted; the analyzer applies the title format.
    """
    text = (text or "").strip()
    if not text or NO_ISSUES_MARKER in text:
        return []

    if not has_field_markers(text):
        if len(text) < MIN_BLOCK_LENGTH:
            LOGGER.debug("Unstructured response too short to use (%d chars)", len(text))
            return []
        return [_content_analysis_draft(text)]

    # Drop conversational lead-ins such as "Here are the issues I found:".
    text = _PREAMBLE.sub("", text, count=1)

    drafts: list[IssueDraft] = []
    blocks = [b for b in _ISSUE_MARKER.split(text) if b.strip()]
    for block in blocks:
        draft = parse_issue_block(block)
        if draft.title != UNTITLED_SENTINEL:
            drafts.append(draft)
            continue

        stripped = block.strip()
        if len(stripped) <= MIN_BLOCK_LENGTH:
            LOGGER.debug("Discarding untitled block: %r", stripped)
            continue
        first_line = next(line.strip() for line in stripped.splitlines() if line.strip())
        drafts.append(draft.with_changes(title=truncate(first_line, TITLE_LIMIT)))

    if not drafts:
        return [_content_analysis_draft(text)]
    return drafts
