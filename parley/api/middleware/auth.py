"""Bearer token verification for API requests.

Verifies HS256 (by default) JWTs and yields the caller identity. Missing
credentials are a 401; credentials that fail verification are a 403.
"""

import time
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from parley.api.dependencies import SettingsDep
from parley.api.models.context import CallerIdentity
from parley.config.models.api import AuthConfig
from parley.observability.logging import get_logger

logger = get_logger(__name__)

# Security scheme for OpenAPI docs
security_scheme = HTTPBearer(auto_error=False)


def issue_token(user_id: str, username: str | None, config: AuthConfig) -> str:
    """Mint a signed token for a caller.

    Raises:
        RuntimeError: If no signing secret is configured
    """
    secret = config.resolved_secret()
    if not secret:
        raise RuntimeError("JWT secret is not configured")

    now = int(time.time())
    claims = {
        "sub": user_id,
        "userId": user_id,
        "iat": now,
        "exp": now + config.token_ttl_seconds,
    }
    if username:
        claims["username"] = username
    return jwt.encode(claims, secret, algorithm=config.jwt_algorithm)


async def get_caller_identity(
    request: Request,
    settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
) -> CallerIdentity:
    """Validate the bearer token and extract the caller identity.

    Raises:
        HTTPException: 401 if the token is missing, 403 if it is invalid or
            expired, 500 if no verification secret is configured
    """
    if credentials is None:
        logger.warning("auth_missing_token", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    secret = settings.auth.resolved_secret()
    if not secret:
        logger.error("auth_secret_not_configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        )

    try:
        payload = jwt.decode(
            credentials.credentials,
            secret,
            algorithms=[settings.auth.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning("auth_invalid_token", error=str(e), path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        ) from None

    user_id = payload.get("sub") or payload.get("userId")
    if not user_id:
        logger.warning("auth_missing_subject", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    identity = CallerIdentity(user_id=str(user_id), username=payload.get("username"))
    logger.debug("auth_success", user_id=identity.user_id)
    return identity


# Type alias for dependency injection
CallerIdentityDep = Annotated[CallerIdentity, Depends(get_caller_identity)]
