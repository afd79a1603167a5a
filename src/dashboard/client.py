"""
Async HTTP client for the workshop REST API.
Wraps httpx and turns every failure into an APIError.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the workshop API cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Raised when the workshop API rejects our credentials (HTTP 401)."""


class WorkshopAPIClient:
    """Thin wrapper around httpx.AsyncClient for the workshop API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Any = None,
                   params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=json, params=params)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Execute a single request and decode the JSON body.

        There is no retry loop: a failed call surfaces immediately.

        Returns:
            The decoded JSON body, or None when the body is empty.

        Raises:
            AuthenticationError: On HTTP 401.
            APIError: On timeouts, transport errors, other HTTP errors and
                bodies that are not JSON.
        """
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            raise APIError(f"Request timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            raise APIError(f"Could not reach workshop API: {e}")

        logger.debug(f"{method} {path} -> {resp.status_code}")
        if resp.status_code == 401:
            raise AuthenticationError("Not authenticated", status_code=401)
        if resp.status_code >= 400:
            raise APIError(
                f"{method} {path} failed with status {resp.status_code}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise APIError(f"Non-JSON response from {method} {path}: {resp.text[:200]}",
                           status_code=resp.status_code)
