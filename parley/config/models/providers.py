"""Completion provider configuration models."""

import os
from typing import Literal

from pydantic import BaseModel, Field, SecretStr

CompletionProviderType = Literal["openai", "mock"]


class CompletionProviderConfig(BaseModel):
    """Configuration for the text-generation backend."""

    provider: CompletionProviderType = Field(
        default="openai",
        description="Provider type",
    )
    model: str = Field(
        default_factory=lambda: os.environ.get("OPENAI_MODEL", "gpt-4"),
        description="Model identifier",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key (prefer OPENAI_API_KEY env var)",
    )
    base_url: str | None = Field(
        default=None,
        description="Custom API base URL",
    )
    max_tokens: int = Field(
        default=500,
        gt=0,
        description="Maximum tokens per reply",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="HTTP client timeout in seconds",
    )

    def resolved_api_key(self) -> str | None:
        """Return the configured key, falling back to OPENAI_API_KEY."""
        if self.api_key is not None:
            return self.api_key.get_secret_value()
        return os.environ.get("OPENAI_API_KEY") or None


class ProvidersConfig(BaseModel):
    """Provider configuration sections."""

    completion: CompletionProviderConfig = Field(
        default_factory=CompletionProviderConfig,
        description="Completion provider",
    )
