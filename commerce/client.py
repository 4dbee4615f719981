"""
Commerce API Client

HTTP client for the commerce platform's project-scoped REST API.
Every request carries a bearer token from the TokenProvider.
"""

import logging
from typing import Any, Optional

import httpx

from .auth import TokenProvider
from .exceptions import ApiError

logger = logging.getLogger(__name__)


class CommerceClient:
    """
    Client for the commerce platform REST API.

    Paths are relative to the project, e.g. "/carts/{id}".
    An empty path addresses the project resource itself.

    Usage:
        client = CommerceClient(api_url, project_key, token_provider, http_client)
        cart = await client.get_or_none(f"/carts/{cart_id}")
        updated = await client.post(f"/carts/{cart_id}", {"version": 3, "actions": [...]})
    """

    def __init__(
        self,
        api_url: str,
        project_key: str,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient,
    ):
        """
        Initialize commerce client.

        Args:
            api_url: Base URL of the commerce API
            project_key: Project key prefixed to every path
            token_provider: Source of bearer tokens
            http_client: Shared async HTTP client
        """
        self.base_url = f"{api_url.rstrip('/')}/{project_key}"
        self.tokens = token_provider
        self._http_client = http_client

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _url(self, path: str) -> str:
        if path and not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    @staticmethod
    def _params(query: Optional[dict[str, Any]]) -> dict[str, Any]:
        if not query:
            return {}
        return {k: v for k, v in query.items() if v is not None}

    async def _send(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> httpx.Response:
        """Send an authenticated request and return the raw response"""
        token = await self.tokens.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            response = await self._http_client.request(
                method,
                self._url(path),
                params=self._params(query),
                headers=headers,
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} transport error: {e}")
            raise ApiError(502, str(e), method=method, path=path) from e

        if response.status_code == 401:
            self.tokens.invalidate()

        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
        if not response.is_success:
            logger.error(f"{method} {path} failed: {response.status_code} - {response.text}")
            raise ApiError(response.status_code, response.text, method=method, path=path)

    @staticmethod
    def _json(response: httpx.Response, method: str, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body: {response.text[:200]}")
            raise ApiError(502, "Invalid JSON in response body", method=method, path=path) from e

    async def get(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """GET JSON"""
        response = await self._send("GET", path, query)
        self._raise_for_status(response, "GET", path)
        return self._json(response, "GET", path)

    async def get_or_none(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """GET JSON, resolving a 404 to None"""
        response = await self._send("GET", path, query)
        if response.status_code == 404:
            return None
        self._raise_for_status(response, "GET", path)
        return self._json(response, "GET", path)

    async def post(
        self,
        path: str,
        body: Any,
        query: Optional[dict[str, Any]] = None,
    ) -> Any:
        """POST a JSON body"""
        response = await self._send("POST", path, query, body=body)
        self._raise_for_status(response, "POST", path)
        return self._json(response, "POST", path)

    async def delete(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """DELETE a resource"""
        response = await self._send("DELETE", path, query)
        self._raise_for_status(response, "DELETE", path)
        return self._json(response, "DELETE", path)
