"""
Commerce Platform Authentication

OAuth client-credentials token acquisition with an in-memory,
per-instance token cache.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from .exceptions import AuthError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 300


class TokenProvider:
    """
    Acquires and caches a bearer token for the commerce API.

    A token is reused while it has more than `expiry_margin` seconds left.
    Refreshes are single-flight: callers arriving while a grant is in
    progress wait for it and share its result.

    Usage:
        tokens = TokenProvider(
            auth_url="https://auth.example.com",
            client_id="...",
            client_secret="...",
            http_client=httpx.AsyncClient(),
        )
        token = await tokens.get_token()
    """

    def __init__(
        self,
        auth_url: str,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient,
        scopes: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        expiry_margin: float = 5.0,
    ):
        """
        Initialize the token provider.

        Args:
            auth_url: Base URL of the auth service (without /oauth/token)
            client_id: API client id
            client_secret: API client secret
            http_client: Shared async HTTP client
            scopes: Optional space-separated scope list
            clock: Monotonic clock in seconds, injectable for tests
            expiry_margin: Seconds before expiry at which a token is refreshed
        """
        self.token_url = f"{auth_url.rstrip('/')}/oauth/token"
        self._client_id = client_id
        self._client_secret = client_secret
        self._scopes = scopes
        self._http_client = http_client
        self._clock = clock
        self._expiry_margin = expiry_margin

        self._access_token: Optional[str] = None
        self._expires_at: float = 0.0
        self._refresh_lock = asyncio.Lock()

    def _cached(self) -> Optional[str]:
        if self._access_token and self._expires_at - self._clock() > self._expiry_margin:
            return self._access_token
        return None

    async def get_token(self) -> str:
        """Return a valid bearer token, requesting a new one when needed"""
        token = self._cached()
        if token:
            return token

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            token = self._cached()
            if token:
                return token
            return await self._request_token()

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs a new grant"""
        self._access_token = None
        self._expires_at = 0.0

    async def _request_token(self) -> str:
        data = {"grant_type": "client_credentials"}
        if self._scopes:
            data["scope"] = self._scopes

        requested_at = self._clock()
        try:
            response = await self._http_client.post(
                self.token_url,
                data=data,
                auth=(self._client_id, self._client_secret),
            )
        except httpx.HTTPError as e:
            logger.error(f"Token request to {self.token_url} failed: {e}")
            raise AuthError(f"Auth token request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Token request rejected: {response.status_code} - {response.text}"
            )
            raise AuthError(
                f"Auth token request failed ({response.status_code}): {response.text}"
            )

        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthError("Auth token response did not contain an access_token")

        expires_in = payload.get("expires_in") or DEFAULT_EXPIRES_IN
        self._access_token = access_token
        self._expires_at = requested_at + expires_in
        logger.info(f"Refreshed commerce access token (expires in {expires_in}s)")
        return access_token
