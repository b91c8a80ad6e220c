from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from issue_drafter.core.constants import DEFAULT_MODEL
from issue_drafter.core.exceptions import ConfigurationError

_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """
    Process-wide settings resolved from environment variables.
    """
    api_key: str
    model: str = DEFAULT_MODEL
    structured_output: bool = True
    title_format: str | None = None
    prompts_path: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=get_api_key(env),
            model=env.get("ISSUE_DRAFTER_MODEL", "").strip() or DEFAULT_MODEL,
            structured_output=env.get("ISSUE_DRAFTER_STRUCTURED_OUTPUT", "1").strip().lower() not in _FALSY,
            title_format=env.get("ISSUE_DRAFTER_TITLE_FORMAT", "").strip() or None,
            prompts_path=Path(env["ISSUE_DRAFTER_PROMPTS"]) if env.get("ISSUE_DRAFTER_PROMPTS", "").strip() else None,
        )


# This is a function to resolve GOOGLE_API_KEY from environment variables.
def get_api_key(environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    api_key = env.get("GOOGLE_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError(
            "GOOGLE_API_KEY is required.\n"
            "Example: export GOOGLE_API_KEY='YOUR_KEY'\n"
            "Then rerun the command."
        )
    return api_key
