from __future__ import annotations

from unittest.mock import MagicMock

from acsh import state
from acsh.cli.completions import (
    config_key_completion,
    model_completion,
    provider_completion,
)


def _values(items):
    return [item.value for item in items]


def test_provider_completion(models_file):
    assert _values(provider_completion(None, None, "")) == ["anthropic", "openai", "groq", "ollama"]
    assert _values(provider_completion(None, None, "O")) == ["openai", "ollama"]


def test_model_completion_uses_typed_provider(models_file):
    ctx = MagicMock()
    ctx.params = {"provider": "anthropic"}

    assert _values(model_completion(ctx, None, "claude-3-7")) == ["claude-3-7-sonnet-latest"]
    assert _values(model_completion(ctx, None, "gpt")) == []


def test_model_completion_without_provider(models_file):
    assert _values(model_completion(None, None, "code")) == ["codellama"]


def test_completion_without_models_file_is_empty():
    assert provider_completion(None, None, "") == []
    assert model_completion(None, None, "") == []


def test_config_key_completion():
    values = _values(config_key_completion(None, None, "api_"))
    assert values == ["api_completion_cost", "api_prompt_cost"]


def test_completion_with_undecodable_models_file_is_empty(isolated_home):
    state.state_root().mkdir(parents=True, exist_ok=True)
    state.models_file().write_bytes(b"\xff\xfe\x00")

    assert provider_completion(None, None, "") == []
