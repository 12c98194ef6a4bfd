from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when the configuration file is missing, unreadable or invalid."""
