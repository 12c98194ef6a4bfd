"""LLM-powered shell completion with an interactive model picker."""

__version__ = "0.5.0"
__description__ = "LLM-powered shell completion helper and model picker."
