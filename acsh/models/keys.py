"""Composite registry keys built from a (provider, model) pair.

A key is ``provider + SEPARATOR + model``. The separator is rejected inside
either field at encode time, so every key splits back into exactly one pair
and two different pairs can never share a key.
"""

from __future__ import annotations

import re
from typing import Tuple

from acsh.errors import InvalidKeyError, MalformedKeyError

SEPARATOR = "|"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _check_field(name: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidKeyError(f"{name} cannot be empty")
    if SEPARATOR in value:
        raise InvalidKeyError(f"{name} cannot contain '{SEPARATOR}': {value!r}")
    if _CONTROL_CHARS.search(value):
        raise InvalidKeyError(f"{name} cannot contain control characters: {value!r}")


def encode(provider: str, model: str) -> str:
    """Return the registry key for ``provider`` and ``model``."""
    _check_field("provider", provider)
    _check_field("model", model)
    return f"{provider}{SEPARATOR}{model}"


def decode(key: str) -> Tuple[str, str]:
    """Split ``key`` back into ``(provider, model)``."""
    parts = key.split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise MalformedKeyError(f"malformed registry key: {key!r}")
    return parts[0], parts[1]


def provider_of(key: str) -> str:
    return decode(key)[0]


def display_label(key: str) -> str:
    """Human-readable ``provider: model`` form of a key."""
    provider, model = decode(key)
    return f"{provider}: {model}"
