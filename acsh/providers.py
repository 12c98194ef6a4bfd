"""Provider model-list APIs used to rebuild ``models.json``."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests

from acsh.errors import ProviderAPIError
from acsh.logging import debug

OPENAI_MODELS_URL = "https://api.openai.com/v1/models"
OPENAI_CHAT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_MODELS_URL = "https://api.anthropic.com/v1/models"
ANTHROPIC_MESSAGES_ENDPOINT = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

REQUEST_TIMEOUT = 10.0

_OPENAI_CHAT_PATTERN = re.compile(r"^(gpt|o1|o3)")
_DATED_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
_EXCLUDED_WORDS = ("preview", "search", "transcribe", "tts", "image")

STATIC_MODELS: List[Dict[str, Any]] = [
    {
        "model": "codellama",
        "provider": "ollama",
        "endpoint": "http://localhost:11434/api/chat",
        "prompt_cost": 0,
        "completion_cost": 0,
    }
]

# (substring, prompt cost, completion cost); first match wins
_ANTHROPIC_PRICING: List[Tuple[str, str, str]] = [
    ("haiku", "0.00000025", "0.00000125"),
    ("sonnet", "0.0000030", "0.0000150"),
    ("opus", "0.0000150", "0.0000750"),
]
_DEFAULT_PRICING = ("0.0000030", "0.0000150")


def model_cost(provider: str, model: str) -> Tuple[Decimal, Decimal]:
    """Return ``(prompt_cost, completion_cost)`` per token for a model."""
    if provider in ("openai", "ollama"):
        return Decimal(0), Decimal(0)
    prompt, completion = _DEFAULT_PRICING
    if provider == "anthropic":
        for needle, prompt_cost, completion_cost in _ANTHROPIC_PRICING:
            if needle in model:
                prompt, completion = prompt_cost, completion_cost
                break
    return Decimal(prompt), Decimal(completion)


def is_excluded(model: str) -> bool:
    """Whether a model id is a preview, dated snapshot, or non-chat variant."""
    lowered = model.lower()
    if any(word in lowered for word in _EXCLUDED_WORDS):
        return True
    return bool(_DATED_PATTERN.search(model))


def _get_model_ids(url: str, headers: Dict[str, str], provider: str) -> List[str]:
    try:
        response = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise ProviderAPIError(f"Failed to fetch {provider} models: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderAPIError(
            f"{provider} returned invalid JSON (HTTP {response.status_code})"
        ) from e

    if isinstance(data, dict) and data.get("error"):
        error = data["error"]
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ProviderAPIError(f"{provider} API error: {message}")
    if response.status_code >= 400:
        raise ProviderAPIError(f"{provider} API error: HTTP {response.status_code}")

    ids = [item.get("id", "") for item in data.get("data", []) if isinstance(item, dict)]
    # Newest names first, duplicates dropped
    return sorted({model_id for model_id in ids if model_id}, reverse=True)


def _descriptor(provider: str, model: str, endpoint: str) -> Dict[str, Any]:
    prompt_cost, completion_cost = model_cost(provider, model)
    return {
        "model": model,
        "provider": provider,
        "endpoint": endpoint,
        "prompt_cost": float(prompt_cost),
        "completion_cost": float(completion_cost),
    }


def fetch_openai_models(api_key: str) -> List[Dict[str, Any]]:
    """List OpenAI chat models as descriptors.

    Raises:
        ProviderAPIError: If the request fails or the API reports an error.
    """
    ids = _get_model_ids(
        OPENAI_MODELS_URL, {"Authorization": f"Bearer {api_key}"}, "openai"
    )
    return [
        _descriptor("openai", model, OPENAI_CHAT_ENDPOINT)
        for model in ids
        if _OPENAI_CHAT_PATTERN.match(model)
    ]


def fetch_anthropic_models(api_key: str) -> List[Dict[str, Any]]:
    """List Anthropic models as descriptors.

    Raises:
        ProviderAPIError: If the request fails or the API reports an error.
    """
    ids = _get_model_ids(
        ANTHROPIC_MODELS_URL,
        {"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
        "anthropic",
    )
    return [_descriptor("anthropic", model, ANTHROPIC_MESSAGES_ENDPOINT) for model in ids]


@dataclass
class Catalog:
    """Result of a provider refresh."""

    models: List[Dict[str, Any]] = field(default_factory=list)
    filtered: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def count_by_provider(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for descriptor in self.models:
            provider = descriptor.get("provider", "unknown")
            counts[provider] = counts.get(provider, 0) + 1
        return counts


def build_catalog(openai_key: Optional[str], anthropic_key: Optional[str]) -> Catalog:
    """Collect descriptors from every configured provider.

    Models are ordered Anthropic, then OpenAI, then the static entries.
    A failing provider is reported in ``Catalog.warnings`` and skipped.

    Raises:
        ProviderAPIError: If no API key is available at all.
    """
    if not openai_key and not anthropic_key:
        raise ProviderAPIError(
            "No API keys found. Set OPENAI_API_KEY and/or ANTHROPIC_API_KEY."
        )
    catalog = Catalog()

    groups: List[List[Dict[str, Any]]] = []
    for name, key, fetch in (
        ("anthropic", anthropic_key, fetch_anthropic_models),
        ("openai", openai_key, fetch_openai_models),
    ):
        if not key:
            catalog.warnings.append(f"{name.upper()}_API_KEY not set; skipping {name} models")
            continue
        try:
            groups.append(fetch(key))
        except ProviderAPIError as exc:
            catalog.warnings.append(str(exc))
    groups.append([dict(item) for item in STATIC_MODELS])

    for group in groups:
        for descriptor in group:
            if is_excluded(descriptor["model"]):
                catalog.filtered.append(descriptor["model"])
            else:
                catalog.models.append(descriptor)
    catalog.filtered.sort()
    debug(f"catalog: kept {len(catalog.models)}, filtered {len(catalog.filtered)}")
    return catalog


def write_catalog(path: Path, models: List[Dict[str, Any]]) -> None:
    """Write ``models`` to ``path`` in the format read by ``JsonFileSource``."""
    payload = {
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "models": models,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
