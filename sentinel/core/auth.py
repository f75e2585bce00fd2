"""Pluggable access control for the monitor API."""

import hmac

from fastapi import HTTPException, Request, status

from sentinel.config import AuthConfig
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)


class AccessPolicy:
    """
    Capability check run before every monitor route.

    Implementations raise ``HTTPException`` to reject a request. The check
    pipeline itself knows nothing about identities; it only receives a
    monitor id.
    """

    async def authorize(self, request: Request) -> None:
        raise NotImplementedError


class AllowAllPolicy(AccessPolicy):
    """Accepts every request."""

    async def authorize(self, request: Request) -> None:
        return None


class APIKeyPolicy(AccessPolicy):
    """Requires a shared API key in a request header."""

    def __init__(self, api_key: str, header_name: str = "X-API-Key"):
        if not api_key:
            raise ValueError("api_key must not be empty")
        self.api_key = api_key
        self.header_name = header_name

    async def authorize(self, request: Request) -> None:
        """
        Verify the API key from request headers.

        Raises:
            HTTPException: If the key is missing or does not match
        """
        supplied = request.headers.get(self.header_name)

        if not supplied:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="API key missing",
                headers={"WWW-Authenticate": f"ApiKey {self.header_name}"},
            )

        if not hmac.compare_digest(supplied.encode(), self.api_key.encode()):
            logger.warning(
                "Rejected request with invalid API key",
                extra={"path": request.url.path}
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
                headers={"WWW-Authenticate": f"ApiKey {self.header_name}"},
            )


def build_access_policy(config: AuthConfig) -> AccessPolicy:
    """Pick the policy selected by the auth configuration."""
    if config.enabled:
        return APIKeyPolicy(config.api_key, config.header_name)
    return AllowAllPolicy()
