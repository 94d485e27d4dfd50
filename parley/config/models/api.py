"""API server and authentication configuration models."""

import os

from pydantic import BaseModel, Field, SecretStr


class APIConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, ge=1, le=65535, description="Bind port")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow credentials on CORS requests",
    )


class AuthConfig(BaseModel):
    """Bearer token verification settings."""

    jwt_secret: SecretStr | None = Field(
        default=None,
        description="HMAC secret (prefer JWT_SECRET env var)",
    )
    jwt_algorithm: str = Field(default="HS256", description="Signing algorithm")
    token_ttl_seconds: int = Field(
        default=86400,
        gt=0,
        description="Lifetime of issued tokens",
    )

    def resolved_secret(self) -> str | None:
        """Return the configured secret, falling back to JWT_SECRET."""
        if self.jwt_secret is not None:
            return self.jwt_secret.get_secret_value()
        return os.environ.get("JWT_SECRET") or None
