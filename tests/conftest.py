"""Pytest configuration for issue_drafter tests.

Puts the in-repo `src` directory on `sys.path` so the package imports without
an editable install, and provides a scripted stand-in for the Gemini client.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class ScriptedLLM:
    """Returns queued responses in order; an Exception instance is raised instead."""

    def __init__(self, *responses: Any, structured: bool = True) -> None:
        self._responses = list(responses)
        self._structured = structured
        self.calls: list[dict[str, Any]] = []

    @property
    def supports_structured_output(self) -> bool:
        return self._structured

    def generate(self, prompt, *, system_prompt=None, media=None, schema=None):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "media": media, "schema": schema})
        if not self._responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def scripted_llm():
    return ScriptedLLM
