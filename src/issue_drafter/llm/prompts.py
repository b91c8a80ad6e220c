from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from issue_drafter.core.exceptions import ConfigurationError
from issue_drafter.core.models import ContentKind
from issue_drafter.core.title_format import title_format_patterns


@dataclass(frozen=True)
class PromptBundle:
    """
    Holds prompt templates used by the content analyzer.

    Defaults live in code; load_prompts_from_yaml() overrides any subset.
    Templates use str.format placeholders: {grouping}, {format_instructions},
    {title_rule}, {description_rules} and, for text, {text}. Either schema_output or
    free_text_output is appended, depending on how the model is asked to answer.
    """
    system: str
    grouping_image: str
    grouping_pdf: str
    grouping_text: str
    description_rules: str
    image: str
    pdf: str
    text: str
    schema_output: str
    free_text_output: str


_DESCRIPTION_RULES = (
    "Format descriptions using Markdown with:\n"
    "- Use ## and ### for section headings\n"
    "- Use **bold** for emphasis and important points\n"
    "- Use bullet lists and numbered lists for steps or multiple points\n"
    "- Use `code` formatting for code snippets, selectors, or technical terms\n"
    "- Use > blockquotes for highlighting important notes\n"
)


# This is a function to return the default prompt templates for the project.
def default_prompts() -> PromptBundle:
    return PromptBundle(
        system=(
            "You turn screenshots, documents and notes into issues for a project management tool.\n"
            "Each issue must be focused, actionable, and written for the engineer who will fix it.\n"
        ),
        grouping_image=(
            "IMPORTANT BALANCED GROUPING GUIDELINES:\n"
            "- Group issues with SAME ROOT CAUSE or that require the SAME SOLUTION\n"
            "- Create separate issues when problems:\n"
            "  * Affect different components or systems\n"
            "  * Have different root causes\n"
            "  * Would be fixed by different developers\n"
            "  * Would be fixed at different times\n"
            "- For UI issues: group elements that appear in the same section/panel\n"
            "- For functionality issues: separate by feature or interaction type\n"
            "- If you cannot identify any clear issues, report that no issues were found\n"
        ),
        grouping_pdf=(
            "IMPORTANT BALANCED GROUPING GUIDELINES:\n"
            "- Group issues with SAME ROOT CAUSE or that require the SAME SOLUTION\n"
            "- Create separate issues when problems:\n"
            "  * Affect different sections of the document\n"
            "  * Have different root causes\n"
            "  * Would be fixed by different teams or processes\n"
            "  * Would be addressed in different development phases\n"
            "- For document formatting: group similar formatting issues together\n"
            "- For content issues: separate by topic, section, or information type\n"
            "- If you cannot identify any clear issues, report that no issues were found\n"
        ),
        grouping_text=(
            "IMPORTANT BALANCED GROUPING GUIDELINES:\n"
            "- Group issues that share the SAME ROOT CAUSE or require the SAME SOLUTION\n"
            "- Create separate issues when problems:\n"
            "  * Relate to different functional areas\n"
            "  * Have different underlying causes\n"
            "  * Would be assigned to different people or teams\n"
            "  * Have fundamentally different priorities or impact\n"
            "- Balance between having too many small issues and too few large issues\n"
            "- If you cannot identify any clear issues or the text doesn't contain enough information, "
            "it's completely acceptable to report that no issues were found instead of forcing an issue creation.\n"
        ),
        description_rules=_DESCRIPTION_RULES,
        image=(
            "Analyze this image and generate structured issues for a project management tool.\n\n"
            "{grouping}\n"
            "{format_instructions}\n"
            "For EACH issue, extract:\n"
            "1. Title: {title_rule}\n"
            "2. Description: Detailed description that includes ALL related aspects grouped into this issue.\n"
            "{description_rules}"
            "3. Priority: P0 (highest), P1 (high), P2 (medium), or P3 (low)\n"
            "4. Tags: 1-3 relevant tags\n"
        ),
        pdf=(
            "Analyze this PDF document and generate structured issues for a project management tool.\n\n"
            "{grouping}\n"
            "{format_instructions}\n"
            "For EACH issue, extract:\n"
            "1. Title: {title_rule}\n"
            "2. Description: Detailed description that includes ALL related aspects grouped into this issue.\n"
            "{description_rules}"
            "3. Priority: P0 (highest), P1 (high), P2 (medium), or P3 (low)\n"
            "4. Tags: 1-3 relevant tags\n"
        ),
        text=(
            "Analyze this text and generate structured issues for a project management tool.\n\n"
            "{grouping}\n"
            "{format_instructions}\n"
            "When creating titles for issues, {title_rule}.\n"
            "When creating descriptions, be comprehensive and include ALL related aspects that are "
            "grouped into this issue.\n"
            "{description_rules}\n"
            "Text to analyze:\n{text}\n"
        ),
        schema_output=(
            "Return the issues as a JSON array matching the response schema.\n"
            "If there are no issues, return an empty array.\n"
        ),
        free_text_output=(
            "Respond in plain text using exactly this layout for every issue:\n\n"
            "ISSUE 1:\n"
            "TITLE: <title>\n"
            "DESCRIPTION: <markdown description>\n"
            "PRIORITY: <P0|P1|P2|P3>\n"
            "TAGS: <tag>, <tag>\n\n"
            "Number the issues ISSUE 1:, ISSUE 2:, ... and add nothing before the first issue.\n"
            "If there are no issues, respond with exactly: NO ISSUES FOUND\n"
        ),
    )


def load_prompts_from_yaml(path: Path) -> PromptBundle:
    """Load prompt overrides from YAML; keys not present keep their defaults."""
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot load prompts from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Prompt file {path} must contain a mapping")

    known = {f.name for f in fields(PromptBundle)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown prompt keys in {path}: {', '.join(unknown)}")

    base = default_prompts()
    return PromptBundle(**{name: str(data.get(name, getattr(base, name))) for name in known})


def title_format_instructions(title_format: str | None) -> str:
    """Model-facing instructions listing every comma-separated title pattern."""
    patterns = title_format_patterns(title_format)
    if not patterns:
        return ""
    examples = ", ".join(f'"{p}"' for p in patterns)
    return (
        "TITLE FORMAT INSTRUCTIONS:\n"
        f"Please format all issue titles following one of these patterns: {examples}\n"
        "Choose the most appropriate type (feat, bug, chore, etc.) based on the issue content.\n"
        "The text within parentheses should indicate the area or component affected.\n"
        "The text after the colon should be the main title content.\n\n"
        "Examples:\n"
        '- If the issue is a new feature for the portfolio area, use: "feat(portfolio): [Your Title Here]"\n'
        '- If it\'s a bug in the API, use: "bug(api): [Your Title Here]"\n'
        '- If it\'s a refactoring task, use: "refactor(component): [Your Title Here]"\n'
    )


def build_analysis_prompt(
    prompts: PromptBundle,
    kind: ContentKind,
    *,
    title_format: str | None = None,
    text: str | None = None,
    free_text: bool = False,
) -> str:
    has_format = bool(title_format_patterns(title_format))
    if kind is ContentKind.TEXT:
        title_rule = (
            "follow the title format described above"
            if has_format
            else "make them clear and concise, reflecting the consolidated issue"
        )
    else:
        title_rule = (
            'Format using the pattern described above (e.g., "bug(ui): Button alignment issue")'
            if has_format
            else "Clear, concise title that reflects the consolidated issue"
        )

    template = {ContentKind.IMAGE: prompts.image, ContentKind.PDF: prompts.pdf, ContentKind.TEXT: prompts.text}[kind]
    grouping = {
        ContentKind.IMAGE: prompts.grouping_image,
        ContentKind.PDF: prompts.grouping_pdf,
        ContentKind.TEXT: prompts.grouping_text,
    }[kind]

    prompt = template.format(
        grouping=grouping,
        format_instructions=title_format_instructions(title_format),
        title_rule=title_rule,
        description_rules=prompts.description_rules,
        text=text or "",
    )
    output_rules = prompts.free_text_output if free_text else prompts.schema_output
    prompt = f"{prompt}\n{output_rules}"
    return prompt.strip()
