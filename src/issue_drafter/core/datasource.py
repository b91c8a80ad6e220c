from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from issue_drafter.core.exceptions import ContentValidationError
from issue_drafter.core.models import AnalysisContent, ContentKind
from issue_drafter.core.text_utils import normalize_whitespace

LOGGER = logging.getLogger(__name__)

_TEXT_SUFFIXES = {".txt", ".md", ".markdown", ".log", ".csv", ".json"}


@dataclass(frozen=True)
class SourceConfig:
    """
    Describes where the content to analyze comes from.
    """
    kind: str  # "file" | "text" | "data_url"
    path: Path | None = None
    text: str | None = None
    data_url: str | None = None
    content_kind: ContentKind | None = None  # overrides detection for "file"


class ContentSource(ABC):
    @abstractmethod
    def load(self) -> AnalysisContent:
        """Return validated content ready for the analyzer."""
        raise NotImplementedError


# This is a function to map a MIME type onto the content kinds the analyzer understands.
def detect_kind(mime_type: str | None) -> ContentKind:
    mime = (mime_type or "").lower().strip()
    if mime.startswith("image/"):
        return ContentKind.IMAGE
    if mime == "application/pdf":
        return ContentKind.PDF
    if mime.startswith("text/") or mime in {"application/json"}:
        return ContentKind.TEXT
    raise ContentValidationError(f"Unsupported file type: {mime_type or 'unknown'}")


def content_from_text(text: str | None) -> AnalysisContent:
    cleaned = normalize_whitespace(text or "")
    if not cleaned:
        raise ContentValidationError("No valid content provided")
    return AnalysisContent(kind=ContentKind.TEXT, text=cleaned)


def content_from_bytes(
    data: bytes | None,
    mime_type: str | None,
    *,
    kind: ContentKind | None = None,
) -> AnalysisContent:
    """Build content from an uploaded file. Text uploads are decoded as UTF-8."""
    if not data:
        raise ContentValidationError("No valid content provided")

    resolved = kind or detect_kind(mime_type)
    if resolved is ContentKind.TEXT:
        try:
            return content_from_text(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ContentValidationError("Text upload is not valid UTF-8") from e

    if resolved is ContentKind.PDF:
        mime_type = "application/pdf"
    elif not mime_type:
        mime_type = "image/png"
    return AnalysisContent(kind=resolved, data=data, mime_type=mime_type)


def content_from_data_url(data_url: str, *, kind: ContentKind | None = None) -> AnalysisContent:
    """Decode a "data:<mime>;base64,<payload>" URL into binary content."""
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        raise ContentValidationError("Invalid content format. Expected a base64 data URL.")

    header, payload = data_url.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0].strip() or None
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ContentValidationError("Data URL payload is not valid base64") from e
    return content_from_bytes(data, mime_type, kind=kind)


class FileContentSource(ContentSource):
    """
    Reads an image, PDF or text file from disk.
    """

    def __init__(self, path: Path, kind: ContentKind | None = None) -> None:
        self._path = path
        self._kind = kind

    def load(self) -> AnalysisContent:
        if not self._path.is_file():
            raise ContentValidationError(f"File not found: {self._path}")

        mime_type, _ = mimetypes.guess_type(self._path.name)
        if mime_type is None and self._path.suffix.lower() in _TEXT_SUFFIXES:
            mime_type = "text/plain"

        LOGGER.debug("Loading %s as %s", self._path, self._kind or mime_type)
        return content_from_bytes(self._path.read_bytes(), mime_type, kind=self._kind)


class TextContentSource(ContentSource):
    def __init__(self, text: str) -> None:
        self._text = text

    def load(self) -> AnalysisContent:
        return content_from_text(self._text)


class DataUrlContentSource(ContentSource):
    def __init__(self, data_url: str, kind: ContentKind | None = None) -> None:
        self._data_url = data_url
        self._kind = kind

    def load(self) -> AnalysisContent:
        return content_from_data_url(self._data_url, kind=self._kind)


# This is a factory method that returns the correct source implementation for the configured input.
def create_content_source(config: SourceConfig) -> ContentSource:
    kind = config.kind.lower().strip()
    if kind == "file":
        if not config.path:
            raise ContentValidationError("file source requires a path")
        return FileContentSource(config.path, kind=config.content_kind)

    if kind == "text":
        return TextContentSource(config.text or "")

    if kind in {"data_url", "dataurl"}:
        if not config.data_url:
            raise ContentValidationError("data_url source requires a data URL")
        return DataUrlContentSource(config.data_url, kind=config.content_kind)

    raise ContentValidationError(f"Unknown source kind: {config.kind}")
