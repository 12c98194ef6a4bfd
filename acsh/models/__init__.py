"""Model registry, key codec and descriptor sources."""

from .keys import SEPARATOR, decode, display_label, encode
from .registry import ModelRecord, ModelRegistry
from .source import JsonFileSource, ModelSource, StaticSource

__all__ = [
    "SEPARATOR",
    "decode",
    "display_label",
    "encode",
    "ModelRecord",
    "ModelRegistry",
    "JsonFileSource",
    "ModelSource",
    "StaticSource",
]
