"""Pydantic model describing the configuration file."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Config key holding the API key for providers that do not follow <provider>_api_key
_API_KEY_FIELDS = {"ollama": "custom_api_key"}
KEYLESS_PROVIDERS = frozenset({"ollama"})


def api_key_field(provider: str) -> str:
    return _API_KEY_FIELDS.get(provider, f"{provider}_api_key")


class AcshConfig(BaseModel):
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    groq_api_key: str = ""
    custom_api_key: str = ""
    provider: str = "openai"
    model: str = "gpt-4o"
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    endpoint: str = "https://api.openai.com/v1/chat/completions"
    api_prompt_cost: Decimal = Field(default=Decimal("0.000005"), ge=0)
    api_completion_cost: Decimal = Field(default=Decimal("0.000015"), ge=0)
    max_history_commands: int = Field(default=20, ge=0, le=1000)
    max_recent_files: int = Field(default=20, ge=0, le=1000)
    cache_dir: str = "auto"
    cache_size: int = Field(default=10, ge=0, le=10000)
    log_file: str = "auto"

    # Allows <provider>_api_key entries for providers without a dedicated field
    model_config = ConfigDict(extra="allow")

    @field_validator("provider", "model", "endpoint")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value or value.isspace():
            raise ValueError("value cannot be empty")
        return value.strip()

    @field_validator("api_prompt_cost", "api_completion_cost", mode="before")
    @classmethod
    def normalize_cost(cls, value):
        if isinstance(value, float):
            return str(value)
        return value

    @classmethod
    def from_dict(cls, data: dict) -> "AcshConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)

    def api_key_for(self, provider: str) -> str:
        value = getattr(self, api_key_field(provider), "")
        return value if isinstance(value, str) else ""

    @property
    def active_api_key(self) -> str:
        return self.api_key_for(self.provider)

    @property
    def requires_api_key(self) -> bool:
        return self.provider not in KEYLESS_PROVIDERS
