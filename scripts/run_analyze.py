from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from issue_drafter.core.config import Settings
from issue_drafter.core.constants import PRIORITY_LABELS
from issue_drafter.core.datasource import SourceConfig, create_content_source
from issue_drafter.core.exceptions import ConfigurationError, ContentValidationError
from issue_drafter.core.models import ContentKind
from issue_drafter.core.text_utils import render_draft_markdown
from issue_drafter.llm.gemini import GeminiClient, GeminiConfig
from issue_drafter.llm.prompts import default_prompts, load_prompts_from_yaml
from issue_drafter.pipelines.analyze_content import AnalyzerConfig, ContentAnalyzer, analysis_message

LOGGER = logging.getLogger(__name__)


# This is a function to configure structured logging for CLI scripts.
def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


# This is a function to parse CLI arguments for analyzing a file or pasted text.
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Turn an image, PDF or text into issue drafts using Gemini.")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Image, PDF or text file to analyze.")
    source.add_argument("--text", help="Text to analyze ('-' reads stdin).")
    p.add_argument("--kind", choices=[k.value for k in ContentKind], help="Override content type detection.")
    p.add_argument("--title-format", default=None, help='Title pattern(s), e.g. "feat(ui): Title".')
    p.add_argument("--model", default=None, help="Gemini model id (default: ISSUE_DRAFTER_MODEL or built-in).")
    p.add_argument("--no-schema", action="store_true", help="Ask for free text and parse it instead of JSON.")
    p.add_argument("--json", action="store_true", help="Print drafts as JSON.")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def build_source_config(args: argparse.Namespace) -> SourceConfig:
    kind = ContentKind(args.kind) if args.kind else None
    if args.file is not None:
        return SourceConfig(kind="file", path=args.file, content_kind=kind)
    text = sys.stdin.read() if args.text == "-" else args.text
    return SourceConfig(kind="text", text=text)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = Settings.from_env()
        content = create_content_source(build_source_config(args)).load()
        prompts = load_prompts_from_yaml(settings.prompts_path) if settings.prompts_path else default_prompts()
    except (ConfigurationError, ContentValidationError) as e:
        LOGGER.error("%s", e)
        return 2

    llm = GeminiClient(
        GeminiConfig(
            api_key=settings.api_key,
            model=args.model or settings.model,
            structured_output=settings.structured_output and not args.no_schema,
        )
    )
    analyzer = ContentAnalyzer(
        llm=llm,
        prompts=prompts,
        config=AnalyzerConfig(default_title_format=settings.title_format),
    )

    result = analyzer.analyze_detailed(content, args.title_format)
    message = analysis_message(result.drafts)

    if args.json:
        print(json.dumps(
            {
                "analysis": [d.to_dict() for d in result.drafts],
                "message": message,
                "error": result.is_error,
            },
            indent=2,
        ))
    else:
        print("\n" + "=" * 80)
        print(message)
        print("=" * 80)
        for i, draft in enumerate(result.drafts, start=1):
            print()
            print(render_draft_markdown(
                index=i,
                title=draft.title,
                description=draft.description,
                priority_label=PRIORITY_LABELS[draft.priority],
                tags=draft.tags,
            ))

    return 1 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
