from __future__ import annotations

import itertools

import pytest

from acsh.errors import DecodeError, InvalidKeyError, MalformedKeyError
from acsh.models import keys


def test_encode_joins_with_separator():
    assert keys.encode("openai", "gpt-4o") == "openai|gpt-4o"


def test_decode_inverts_encode_for_awkward_names():
    pairs = [
        ("anthropic", "claude-3-5-haiku-20241022"),
        ("groq", "llama3-70b-8192"),
        ("ollama", "codellama:7b-instruct"),
        ("custom", "model with spaces"),
        ("open:ai", "a/b"),
    ]
    for provider, model in pairs:
        assert keys.decode(keys.encode(provider, model)) == (provider, model)


def test_distinct_pairs_never_share_a_key():
    providers = ["a", "ab", "a b", "b"]
    models = ["b", "ab", "", "c d"]
    seen = {}
    for provider, model in itertools.product(providers, models):
        try:
            key = keys.encode(provider, model)
        except InvalidKeyError:
            continue
        assert key not in seen, (provider, model, seen.get(key))
        seen[key] = (provider, model)


@pytest.mark.parametrize(
    "provider, model",
    [
        ("", "gpt-4o"),
        ("openai", ""),
        ("open|ai", "gpt-4o"),
        ("openai", "gpt|4o"),
        ("groq", "\tllama3"),
        ("openai", "gpt-4o\n"),
    ],
)
def test_encode_rejects_unsafe_fields(provider, model):
    with pytest.raises(InvalidKeyError):
        keys.encode(provider, model)


def test_invalid_key_error_is_a_value_error():
    with pytest.raises(ValueError):
        keys.encode("", "x")


@pytest.mark.parametrize("key", ["openai", "openai|", "|gpt-4o", "a|b|c", ""])
def test_decode_rejects_malformed_keys(key):
    with pytest.raises(MalformedKeyError):
        keys.decode(key)


def test_malformed_key_is_a_decode_error():
    assert issubclass(MalformedKeyError, DecodeError)
    assert issubclass(DecodeError, ValueError)


def test_display_label_and_provider_of():
    key = keys.encode("anthropic", "claude-3-opus-latest")
    assert keys.display_label(key) == "anthropic: claude-3-opus-latest"
    assert keys.provider_of(key) == "anthropic"
