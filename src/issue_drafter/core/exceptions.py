from __future__ import annotations


class IssueDrafterError(Exception):
    """Base class for errors surfaced to callers of issue_drafter."""


class ConfigurationError(IssueDrafterError, RuntimeError):
    """Required settings (API keys, prompt files) are missing or unreadable."""


class ContentValidationError(IssueDrafterError, ValueError):
    """The caller did not provide usable content to analyze."""


class SubmissionValidationError(IssueDrafterError, ValueError):
    """A draft cannot be sent to the tracker as-is (missing team, title, ...)."""
