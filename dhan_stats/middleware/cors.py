"""
CORS header computation for the stats endpoints.

The stats API is read-only and called from the admin dashboard, so only GET and
OPTIONS are advertised. The allowed origin is echoed when the allow-list
contains it (or a wildcard); otherwise the first configured origin is returned,
which the browser will reject for a foreign caller.
"""

from typing import Dict, List, Optional

from dhan_stats.core.config import Settings


ALLOW_HEADERS = "Content-Type, Authorization"
ALLOW_METHODS = "GET, OPTIONS"

# Preflight cache lifetime (seconds)
PREFLIGHT_MAX_AGE = 86400


class CorsPolicy:
    """Allow-list based CORS responder."""

    def __init__(self, allowed_origins: List[str]) -> None:
        self.allowed_origins = allowed_origins or ["*"]

    @classmethod
    def from_settings(cls, settings: Settings) -> "CorsPolicy":
        return cls(settings.cors_origins)

    def allow_origin(self, origin: Optional[str]) -> str:
        request_origin = origin or "*"
        if "*" in self.allowed_origins or request_origin in self.allowed_origins:
            return request_origin
        return self.allowed_origins[0]

    def headers(self, origin: Optional[str]) -> Dict[str, str]:
        """
        Build the CORS headers for a response.

        Args:
            origin: Value of the request's Origin header, if any.

        Returns:
            Header name -> value mapping attached to every stats response.
        """
        return {
            "Access-Control-Allow-Origin": self.allow_origin(origin),
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Max-Age": str(PREFLIGHT_MAX_AGE),
        }
