"""Exception types raised by the registry, key codec, menu and resolver."""

from __future__ import annotations

from typing import Sequence


class AcshError(Exception):
    """Base class for acsh failures."""


class LoadError(AcshError):
    """Raised when the model registry cannot be populated."""


class SourceUnavailableError(LoadError):
    """Raised when the model source is missing or unreadable."""


class InvalidKeyError(AcshError, ValueError):
    """Raised when a provider or model name cannot be encoded into a key."""


class DecodeError(AcshError, ValueError):
    """Raised when a registry key cannot be decoded."""


class MalformedKeyError(DecodeError):
    """Raised when a key does not split into exactly one provider and model."""


class ResolveError(AcshError):
    """Raised when a selection does not resolve to a registry entry."""


class ModelNotFoundError(ResolveError):
    """Raised when a (provider, model) pair is not in the registry."""

    def __init__(self, provider: str, model: str, candidates: Sequence[str] = ()):
        self.provider = provider
        self.model = model
        self.candidates = list(candidates)
        super().__init__(f"unknown model '{model}' for provider '{provider}'")


class SelectionCancelled(ResolveError):
    """Raised when the user leaves the menu without choosing an entry."""


class EmptyMenuError(AcshError):
    """Raised when a menu is requested with no entries."""


class MenuBusyError(AcshError):
    """Raised when a menu is opened while another one owns the terminal."""


class ProviderAPIError(AcshError):
    """Raised when a provider model-list API returns an error."""
