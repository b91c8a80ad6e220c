import re


# This is a function to normalize whitespace so model output and pasted text are compared consistently.
def normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    return text[:limit] + (suffix if len(text) > limit else "")


def build_submission_description(description: str, tags: list[str] | None) -> str:
    """Append the draft's tags as a Markdown line, since tags are not tracker labels.

    Empty tag entries are skipped; without tags the description is returned as-is.
    """
    non_empty = [t.strip() for t in (tags or []) if t and t.strip()]
    if not non_empty:
        return description
    return f"{description}\n\n**Tags:** {', '.join(non_empty)}"


def render_draft_markdown(*, index: int, title: str, description: str, priority_label: str, tags: list[str]) -> str:
    """Assemble a printable card for one draft (used by the CLI)."""
    parts: list[str] = [f"## {index}. {title.strip()}"]
    parts.append(f"Priority: {priority_label}")
    if tags:
        parts.append(f"Tags: {', '.join(tags)}")
    parts.append(description.strip())
    return "\n\n".join(parts)
