"""
Admin authentication for the stats endpoints.

Callers present the shared admin secret in the Authorization header, optionally
as a Bearer token. There is no user or session model.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from dhan_stats.core.config import Settings
from dhan_stats.core.errors import (
    CONFIGURATION_ERROR_MESSAGE,
    AuthenticationError,
    ConfigurationError,
)
from dhan_stats.middleware.pipeline import Middleware, MiddlewareContext
from dhan_stats.models.enums import AdminRole


logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
MISSING_HEADER_MESSAGE = "Missing authorization header"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    authorized: bool
    role: Optional[AdminRole] = None
    error: Optional[str] = None


def extract_token(authorization: str) -> str:
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return authorization


def validate_admin_auth(authorization: Optional[str], settings: Settings) -> AuthResult:
    """
    Check an Authorization header value against the configured admin secret.

    Args:
        authorization: Raw header value, None when the header is absent.
        settings: Application settings holding admin_api_key.

    Returns:
        AuthResult; on failure error holds the client-facing message.
    """
    if authorization is None:
        return AuthResult(authorized=False, error=MISSING_HEADER_MESSAGE)

    if not settings.admin_api_key:
        logger.error("ADMIN_API_KEY is not configured; rejecting admin request")
        return AuthResult(authorized=False, error=CONFIGURATION_ERROR_MESSAGE)

    token = extract_token(authorization)
    if not secrets.compare_digest(token.encode("utf-8"), settings.admin_api_key.encode("utf-8")):
        return AuthResult(authorized=False, error=INVALID_CREDENTIALS_MESSAGE)

    return AuthResult(authorized=True, role=AdminRole.ADMIN)


class AuthMiddleware(Middleware):
    """Rejects with 401 unless the caller presents the admin secret."""

    auth_path = True

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def check(self, ctx: MiddlewareContext) -> None:
        result = validate_admin_auth(ctx.request.headers.get("authorization"), self.settings)
        if not result.authorized:
            if result.error == CONFIGURATION_ERROR_MESSAGE:
                raise ConfigurationError(result.error)
            raise AuthenticationError(result.error)
        ctx.auth_result = result
