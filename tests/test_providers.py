from __future__ import annotations

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from acsh import providers
from acsh.errors import ProviderAPIError
from acsh.models import JsonFileSource, ModelRegistry


def _response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


OPENAI_PAYLOAD = {
    "data": [
        {"id": "gpt-4o"},
        {"id": "gpt-4o-2024-08-06"},
        {"id": "whisper-1"},
        {"id": "o3-mini"},
        {"id": "gpt-4o-mini-tts"},
        {"id": "dall-e-3"},
    ]
}
ANTHROPIC_PAYLOAD = {
    "data": [
        {"id": "claude-3-5-haiku-20241022"},
        {"id": "claude-3-opus-latest"},
    ]
}


def _fake_get(url, headers=None, timeout=None):
    if url == providers.OPENAI_MODELS_URL:
        return _response(OPENAI_PAYLOAD)
    return _response(ANTHROPIC_PAYLOAD)


@pytest.mark.parametrize(
    "provider, model, expected",
    [
        ("openai", "gpt-4o", ("0", "0")),
        ("ollama", "codellama", ("0", "0")),
        ("anthropic", "claude-3-5-haiku-20241022", ("0.00000025", "0.00000125")),
        ("anthropic", "claude-3-opus-latest", ("0.0000150", "0.0000750")),
        ("anthropic", "claude-next", ("0.0000030", "0.0000150")),
    ],
)
def test_model_cost(provider, model, expected):
    assert providers.model_cost(provider, model) == tuple(Decimal(v) for v in expected)


@pytest.mark.parametrize(
    "model, excluded",
    [
        ("gpt-4o", False),
        ("gpt-4o-search-preview", True),
        ("gpt-4o-2024-08-06", True),
        ("gpt-4o-transcribe", True),
        ("gpt-image-1", True),
        ("claude-3-5-haiku-20241022", False),
    ],
)
def test_is_excluded(model, excluded):
    assert providers.is_excluded(model) is excluded


@patch("acsh.providers.requests.get", side_effect=_fake_get)
def test_fetch_openai_keeps_chat_models(mock_get):
    models = providers.fetch_openai_models("sk-test")

    assert [m["model"] for m in models] == ["o3-mini", "gpt-4o-mini-tts", "gpt-4o-2024-08-06", "gpt-4o"]
    headers = mock_get.call_args.kwargs["headers"]
    assert headers["Authorization"] == "Bearer sk-test"


@patch("acsh.providers.requests.get")
def test_api_error_payload_raises(mock_get):
    mock_get.return_value = _response({"error": {"message": "bad key"}}, status_code=401)

    with pytest.raises(ProviderAPIError, match="bad key"):
        providers.fetch_anthropic_models("nope")


@patch("acsh.providers.requests.get")
def test_transport_error_raises(mock_get):
    mock_get.side_effect = requests.ConnectionError("offline")

    with pytest.raises(ProviderAPIError, match="offline"):
        providers.fetch_openai_models("sk-test")


@patch("acsh.providers.requests.get", side_effect=_fake_get)
def test_build_catalog_orders_providers(mock_get):
    catalog = providers.build_catalog("sk-openai", "sk-anthropic")

    assert [(m["provider"], m["model"]) for m in catalog.models] == [
        ("anthropic", "claude-3-opus-latest"),
        ("anthropic", "claude-3-5-haiku-20241022"),
        ("openai", "o3-mini"),
        ("openai", "gpt-4o"),
        ("ollama", "codellama"),
    ]
    assert catalog.filtered == ["gpt-4o-2024-08-06", "gpt-4o-mini-tts"]
    assert catalog.warnings == []
    assert catalog.count_by_provider() == {"anthropic": 2, "openai": 2, "ollama": 1}


@patch("acsh.providers.requests.get", side_effect=_fake_get)
def test_build_catalog_skips_missing_key(mock_get):
    catalog = providers.build_catalog(None, "sk-anthropic")

    assert {m["provider"] for m in catalog.models} == {"anthropic", "ollama"}
    assert catalog.warnings == ["OPENAI_API_KEY not set; skipping openai models"]
    assert mock_get.call_count == 1


@patch("acsh.providers.requests.get")
def test_build_catalog_reports_failing_provider(mock_get):
    mock_get.side_effect = [
        _response({"error": {"message": "overloaded"}}, status_code=529),
        _response(OPENAI_PAYLOAD),
    ]
    catalog = providers.build_catalog("sk-openai", "sk-anthropic")

    assert catalog.warnings == ["anthropic API error: overloaded"]
    assert catalog.count_by_provider() == {"openai": 2, "ollama": 1}


def test_build_catalog_without_keys_fails():
    with pytest.raises(ProviderAPIError, match="No API keys"):
        providers.build_catalog("", None)


@patch("acsh.providers.requests.get", side_effect=_fake_get)
def test_written_catalog_loads_into_registry(mock_get, tmp_path):
    path = tmp_path / "out" / "models.json"
    catalog = providers.build_catalog("sk-openai", "sk-anthropic")
    providers.write_catalog(path, catalog.models)

    payload = json.loads(path.read_text())
    assert "timestamp" in payload

    registry = ModelRegistry()
    registry.load(JsonFileSource(path))
    haiku = registry.lookup("anthropic|claude-3-5-haiku-20241022")
    assert haiku.prompt_cost == Decimal("0.00000025")
    assert registry.count() == len(catalog.models)
