"""Built-in default configuration for acsh."""

from __future__ import annotations

# Values starting with "$" are read from the environment at load time.
DEFAULT_CONFIG_DICT = {
    "openai_api_key": "$OPENAI_API_KEY",
    "anthropic_api_key": "$ANTHROPIC_API_KEY",
    "groq_api_key": "$GROQ_API_KEY",
    "custom_api_key": "$LLM_API_KEY",
    "provider": "openai",
    "model": "gpt-4o",
    "temperature": 0.0,
    "endpoint": "https://api.openai.com/v1/chat/completions",
    "api_prompt_cost": "0.00000500",
    "api_completion_cost": "0.00001500",
    "max_history_commands": 20,
    "max_recent_files": 20,
    "cache_dir": "auto",
    "cache_size": 10,
    "log_file": "auto",
}

DEFAULT_COMMENTS = {
    "openai_api_key": "OpenAI API Key",
    "anthropic_api_key": "Anthropic API Key",
    "groq_api_key": "Groq API Key",
    "custom_api_key": "Custom API Key for Ollama",
    "provider": "Model configuration",
    "max_history_commands": "Max history and recent files",
    "cache_dir": "Cache settings",
    "log_file": "Logging settings",
}
