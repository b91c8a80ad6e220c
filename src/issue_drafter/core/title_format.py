"""
Title-format enforcement for generated issue titles.

A title format is a template such as "feat(ui): Title", or a comma-separated
list of them ("feat(ui): Title, bug(api): Title"). Only the first pattern is
used when rewriting titles; the full list is shown to the model as examples.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_FORMATTED_TITLE = re.compile(r"^[a-z]+\([a-z0-9_-]+\):", re.IGNORECASE)


@dataclass(frozen=True)
class TitleFormatSpec:
    """The authoritative (first) pattern of a title format, decomposed."""

    type_prefix: str
    scope: str

    def render(self, title: str) -> str:
        return f"{self.type_prefix}({self.scope}): {title}"


# This is a function to split a comma-separated title format into its non-empty patterns.
def title_format_patterns(title_format: str | None) -> list[str]:
    if not title_format:
        return []
    return [p.strip() for p in title_format.split(",") if p.strip()]


def parse_title_format(title_format: str | None) -> TitleFormatSpec | None:
    """Return the first pattern as a TitleFormatSpec, or None if it is absent or malformed."""
    if not title_format:
        return None
    primary = title_format.split(",")[0].strip()
    if "(" not in primary or ")" not in primary or ":" not in primary:
        return None
    type_prefix = primary.split("(", 1)[0].strip()
    scope = primary.split("(", 1)[1].split(")", 1)[0].strip()
    return TitleFormatSpec(type_prefix=type_prefix, scope=scope)


def title_follows_format(title: str) -> bool:
    return bool(_FORMATTED_TITLE.match(title or ""))


def apply_title_format(title: str, title_format: str | None = None) -> str:
    """
    Prefix title with the first "type(scope):" pattern of title_format.

    Titles that already look like "type(scope): ..." or already start with this
    format's prefix are returned unchanged, so applying the format twice never
    double-prefixes. A missing or malformed format is a no-op.
    """
    if not title_format:
        return title
    if title_follows_format(title):
        return title
    spec = parse_title_format(title_format)
    if spec is None:
        return title
    if title.startswith(spec.render("")):
        return title
    return spec.render(title)
