from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from issue_drafter.core.constants import DEFAULT_MODEL

LOGGER = logging.getLogger(__name__)

_TRANSIENT_STATUS = {429, 500, 502, 503, 504}
_JSON_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class GeminiConfig:
    """
    Configuration for Gemini generation.
    """
    api_key: str
    model: str = DEFAULT_MODEL
    temperature: float = 0.2
    max_output_tokens: int = 8192
    structured_output: bool = True  # False: the model is only asked for free text


@dataclass(frozen=True)
class MediaPart:
    """Binary payload sent alongside the prompt (image or PDF)."""
    data: bytes
    mime_type: str


class StructuredOutputError(RuntimeError):
    """The model was asked for schema output but answered with text that is not JSON."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class GenerativeModel(Protocol):
    """
    Interface the analyzer depends on (Gemini today, replaceable later).
    """

    @property
    def supports_structured_output(self) -> bool:
        ...

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        media: MediaPart | None = None,
        schema: Mapping[str, Any] | None = None,
    ) -> Any:
        ...


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return True
    return getattr(exc, "code", None) in _TRANSIENT_STATUS


# This is a function to safely read text output across SDK response shapes.
def extract_text(resp: Any) -> str:
    text = getattr(resp, "text", None)
    if isinstance(text, str) and text.strip():
        return text.strip()

    candidates = getattr(resp, "candidates", None)
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        joined = "".join(p.text for p in parts if getattr(p, "text", None))
        if joined.strip():
            return joined.strip()

    raise RuntimeError("Gemini response did not contain readable text output.")


def decode_json_text(text: str) -> Any:
    """Decode JSON that may be wrapped in a ```json fence; raises StructuredOutputError."""
    stripped = (text or "").strip()
    fenced = _JSON_FENCE.match(stripped)
    if fenced:
        stripped = fenced.group(1)
    try:
        return json.loads(stripped)
    except ValueError as e:
        raise StructuredOutputError("Gemini structured response was not valid JSON.", raw_text=text) from e


class GeminiClient:
    """
    Gemini generation client with a small surface area.
    Uses google.genai (new SDK). Keep the interface stable for swapping later.
    """

    def __init__(self, config: GeminiConfig) -> None:
        self._config = config

        try:
            from google import genai  # type: ignore
            from google.genai import types  # type: ignore
        except ImportError as e:
            raise ImportError(
                "Missing dependency: google-genai. Install it with: pip install google-genai"
            ) from e

        self._types = types
        self._client = genai.Client(api_key=config.api_key)

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def supports_structured_output(self) -> bool:
        return self._config.structured_output

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        media: MediaPart | None = None,
        schema: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Generate from a user prompt, optionally with an attached file and an output schema.

        Returns the response text, or the decoded JSON value when a schema is given.

        Notes:
        - Gemini API Content roles must be 'user' or 'model' (no 'system' role).
        - System behavior is provided via GenerateContentConfig(system_instruction=...).
        """
        prompt = (prompt or "").strip()
        if not prompt:
            return ""

        cfg_kwargs: dict[str, Any] = {
            "temperature": self._config.temperature,
            "max_output_tokens": self._config.max_output_tokens,
            "system_instruction": system_prompt or None,
        }
        if schema is not None:
            cfg_kwargs["response_mime_type"] = "application/json"
            cfg_kwargs["response_schema"] = dict(schema)
        cfg = self._types.GenerateContentConfig(**cfg_kwargs)

        contents: Any = prompt
        if media is not None:
            contents = [
                self._types.Part.from_bytes(data=media.data, mime_type=media.mime_type),
                prompt,
            ]

        resp = self._generate_content(contents, cfg)

        if schema is None:
            return extract_text(resp)

        parsed = getattr(resp, "parsed", None)
        if parsed is not None:
            return parsed
        return decode_json_text(extract_text(resp))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(LOGGER, logging.WARNING),
        reraise=True,
    )
    def _generate_content(self, contents: Any, cfg: Any) -> Any:
        LOGGER.debug("Calling Gemini model=%s", self._config.model)
        return self._client.models.generate_content(
            model=self._config.model,
            contents=contents,
            config=cfg,
        )
