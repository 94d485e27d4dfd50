"""Configuration section models."""

from parley.config.models.api import APIConfig, AuthConfig
from parley.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from parley.config.models.providers import CompletionProviderConfig, ProvidersConfig
from parley.config.models.session import SessionConfig

__all__ = [
    "APIConfig",
    "AuthConfig",
    "CompletionProviderConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "ProvidersConfig",
    "SessionConfig",
    "TracingConfig",
]
