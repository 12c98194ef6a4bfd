from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from acsh import state
from acsh.cli.common import get_registry
from acsh.configuration import loader
from acsh.configuration.resolver import API_KEY_ENV_FALLBACKS
from acsh.logging import DEBUG_ENV, set_verbose
from acsh.menu import MENU_ACTIVE_ENV, TerminalSession

SAMPLE_MODELS = [
    {
        "provider": "anthropic",
        "model": "claude-3-5-haiku-20241022",
        "endpoint": "https://api.anthropic.com/v1/messages",
        "prompt_cost": 0.00000025,
        "completion_cost": 0.00000125,
    },
    {
        "provider": "anthropic",
        "model": "claude-3-7-sonnet-latest",
        "endpoint": "https://api.anthropic.com/v1/messages",
        "prompt_cost": 0.000003,
        "completion_cost": 0.000015,
    },
    {
        "provider": "openai",
        "model": "gpt-4o",
        "endpoint": "https://api.openai.com/v1/chat/completions",
        "prompt_cost": 0,
        "completion_cost": 0,
    },
    {
        "provider": "groq",
        "model": "llama3-70b-8192",
        "endpoint": "https://api.groq.com/openai/v1/chat/completions",
        "prompt_cost": 0.00000059,
        "completion_cost": 0.00000079,
    },
    {
        "provider": "ollama",
        "model": "codellama",
        "endpoint": "http://localhost:11434/api/chat",
        "prompt_cost": 0,
        "completion_cost": 0,
    },
]


def _reset_process_state() -> None:
    state.state_root.cache_clear()
    loader.locate_config_file.cache_clear()
    loader._CONFIG_INSTANCE = None
    get_registry().reset()
    set_verbose(False)
    TerminalSession._in_use = False


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Point every test at its own state root with no inherited settings."""
    home = tmp_path / "acsh-home"
    monkeypatch.setenv(state.STATE_ROOT_ENV, str(home))
    for name in (loader.CONFIG_ENV, MENU_ACTIVE_ENV, DEBUG_ENV, *API_KEY_ENV_FALLBACKS.values()):
        monkeypatch.delenv(name, raising=False)
    _reset_process_state()
    yield home
    _reset_process_state()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sample_models() -> list:
    return [dict(item) for item in SAMPLE_MODELS]


@pytest.fixture
def models_file(isolated_home, sample_models) -> Path:
    path = state.models_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"timestamp": "2025-01-01 00:00:00", "models": sample_models}))
    return path
