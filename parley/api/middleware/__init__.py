"""API middleware package."""

from parley.api.middleware.auth import (
    CallerIdentityDep,
    get_caller_identity,
    issue_token,
    security_scheme,
)
from parley.api.middleware.context import RequestContextMiddleware

__all__ = [
    # Auth
    "CallerIdentityDep",
    "get_caller_identity",
    "issue_token",
    "security_scheme",
    # Context
    "RequestContextMiddleware",
]
