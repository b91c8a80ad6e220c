from __future__ import annotations

import logging
from dataclasses import dataclass

from issue_drafter.core.constants import DEFAULT_PRIORITY
from issue_drafter.core.models import (
    AnalysisContent,
    AnalysisResult,
    ContentKind,
    FailedAnalysis,
    FreeTextAnalysis,
    IssueDraft,
    StructuredAnalysis,
)
from issue_drafter.core.title_format import apply_title_format
from issue_drafter.llm.gemini import GenerativeModel, MediaPart, StructuredOutputError
from issue_drafter.llm.parsing import parse_issues_response
from issue_drafter.llm.prompts import PromptBundle, build_analysis_prompt, default_prompts
from issue_drafter.llm.schemas import as_request_schema, decode_structured_issues

LOGGER = logging.getLogger(__name__)

_ERROR_DRAFTS = {
    ContentKind.IMAGE: (
        "Error Analyzing Image",
        "There was an error analyzing the image. Please try again with a different image.",
        ["error", "image-analysis"],
    ),
    ContentKind.PDF: (
        "Error Analyzing PDF",
        "There was an error analyzing the PDF. Please try again with a different PDF or extract the "
        "text manually and paste it in the text input area.",
        ["error", "pdf-analysis"],
    ),
    ContentKind.TEXT: (
        "Error Analyzing Text",
        "There was an error analyzing the text. Please try again with different text.",
        ["error", "text-analysis"],
    ),
}


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Controls analyzer behavior.
    """
    default_title_format: str | None = None  # used when analyze() gets no title_format


def error_draft(kind: ContentKind) -> IssueDraft:
    title, description, tags = _ERROR_DRAFTS[kind]
    return IssueDraft(title=title, description=description, priority=DEFAULT_PRIORITY, tags=list(tags))


def analysis_message(drafts: list[IssueDraft]) -> str:
    """User-facing summary for a result set; an empty set is not an error."""
    if not drafts:
        return "No issues were identified in the content. Try with different content or add more details."
    if len(drafts) > 1:
        return f"{len(drafts)} issues found. The AI has identified multiple issues in your content."
    return "Analysis complete."


class ContentAnalyzer:
    """
    Turns an image, PDF or text into issue drafts: prompt -> model -> normalize -> title format.

    The model is asked for schema-constrained output when it supports it; otherwise
    (or when it answers schema requests with plain text) the free-text parser is used.

    NOTE: analyze() and analyze_detailed() never raise for model failures. Network
    errors, malformed responses and unusable content are logged and returned as a
    single synthetic error draft, so the reviewer always has something to display.
    Caller-side validation (missing text, unsupported file types) happens earlier,
    in issue_drafter.core.datasource, and does raise.
    """

    def __init__(
        self,
        *,
        llm: GenerativeModel,
        prompts: PromptBundle | None = None,
        config: AnalyzerConfig | None = None,
    ) -> None:
        self._llm = llm
        self._prompts = prompts or default_prompts()
        self._config = config or AnalyzerConfig()

    def analyze(self, content: AnalysisContent, title_format: str | None = None) -> list[IssueDraft]:
        return self.analyze_detailed(content, title_format).drafts

    def analyze_detailed(self, content: AnalysisContent, title_format: str | None = None) -> AnalysisResult:
        title_format = title_format or self._config.default_title_format
        try:
            result = self._run(content, title_format)
        except Exception as e:
            LOGGER.exception("Error analyzing %s content", content.kind.value)
            return FailedAnalysis(drafts=[error_draft(content.kind)], error=str(e) or type(e).__name__)

        LOGGER.info(
            "Analyzed %s content: %d draft(s) via %s",
            content.kind.value,
            len(result.drafts),
            type(result).__name__,
        )
        return result

    def _run(self, content: AnalysisContent, title_format: str | None) -> StructuredAnalysis | FreeTextAnalysis:
        media = self._media_for(content)

        if self._llm.supports_structured_output:
            prompt = build_analysis_prompt(
                self._prompts, content.kind, title_format=title_format, text=content.text
            )
            try:
                payload = self._llm.generate(
                    prompt,
                    system_prompt=self._prompts.system,
                    media=media,
                    schema=as_request_schema(),
                )
            except StructuredOutputError as e:
                LOGGER.warning("Schema output unavailable, parsing free text instead: %s", e)
                return self._free_text_result(e.raw_text, title_format)

            drafts = decode_structured_issues(payload)
            return StructuredAnalysis(drafts=self._format_titles(drafts, title_format))

        prompt = build_analysis_prompt(
            self._prompts, content.kind, title_format=title_format, text=content.text, free_text=True
        )
        raw = self._llm.generate(prompt, system_prompt=self._prompts.system, media=media)
        if not isinstance(raw, str):
            raise TypeError(f"Expected text from the model, got {type(raw).__name__}")
        return self._free_text_result(raw, title_format)

    def _free_text_result(self, raw_text: str, title_format: str | None) -> FreeTextAnalysis:
        drafts = parse_issues_response(raw_text)
        return FreeTextAnalysis(drafts=self._format_titles(drafts, title_format), raw_text=raw_text)

    # This is a function to enforce the title format once per draft, right after generation/parsing.
    def _format_titles(self, drafts: list[IssueDraft], title_format: str | None) -> list[IssueDraft]:
        if not title_format:
            return drafts
        return [d.with_changes(title=apply_title_format(d.title, title_format)) for d in drafts]

    def _media_for(self, content: AnalysisContent) -> MediaPart | None:
        if content.kind is ContentKind.TEXT:
            if not (content.text or "").strip():
                raise ValueError("Text content is empty")
            return None
        if not content.data:
            raise ValueError(f"{content.kind.value} content has no data")
        mime_type = content.mime_type
        if content.kind is ContentKind.PDF:
            mime_type = "application/pdf"
        if not mime_type:
            raise ValueError(f"{content.kind.value} content has no MIME type")
        return MediaPart(data=content.data, mime_type=mime_type)
