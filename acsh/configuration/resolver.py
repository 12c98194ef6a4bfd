"""Environment expansion for configuration values."""

from __future__ import annotations

import os
import re
from typing import Any, Dict, Mapping, Optional

from acsh import state

from .schema import AcshConfig

ENV_PATTERN = re.compile(r"\$(?:\{(\w+)\}|(\w+))")

# Environment variables consulted when a provider key is left empty
API_KEY_ENV_FALLBACKS = {
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "groq_api_key": "GROQ_API_KEY",
    "custom_api_key": "LLM_API_KEY",
}


def expand_env(value: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Replace ``$NAME`` and ``${NAME}`` with environment values.

    Unset variables expand to an empty string.
    """
    env = os.environ if environ is None else environ

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        return env.get(name, "")

    return ENV_PATTERN.sub(_replace, value)


def resolve_environment(
    config: AcshConfig, environ: Optional[Mapping[str, str]] = None
) -> AcshConfig:
    """Return a copy of ``config`` with env references and path defaults applied."""
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = config.to_dict()
    for key, value in list(data.items()):
        if isinstance(value, str) and "$" in value:
            data[key] = expand_env(value, env).strip()

    for key, env_name in API_KEY_ENV_FALLBACKS.items():
        if not data.get(key):
            data[key] = env.get(env_name, "")

    if data.get("cache_dir") in ("", "auto"):
        data["cache_dir"] = str(state.cache_dir())
    if data.get("log_file") in ("", "auto"):
        data["log_file"] = str(state.log_file())
    return AcshConfig.from_dict(data)
