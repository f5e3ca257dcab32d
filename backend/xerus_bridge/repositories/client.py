"""
HTTP client for the remote backend API.

Every request carries the bearer token; user-scoped requests also carry the
``X-User-ID`` header. There are no retries: a failed request raises
``BackendAPIError`` after logging what went wrong.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..errors import BackendAPIError

logger = logging.getLogger(__name__)


class BackendAPIClient:
    """Thin JSON client over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Versioned API root; defaults to ``settings.backend_api_url``
            token: Bearer token; defaults to ``settings.backend_token``
            timeout: Request timeout in seconds
            transport: Custom transport (tests pass ``httpx.MockTransport``)
        """
        self.base_url = (base_url or settings.backend_api_url).rstrip("/")
        self.token = token if token is not None else settings.backend_token
        self.timeout = timeout if timeout is not None else settings.backend_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            )
        return self._client

    def _get_headers(self, user_id: Optional[str] = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }
        if user_id:
            headers["X-User-ID"] = user_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        user_id: Optional[str] = None,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        allow_404: bool = False,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None for empty bodies).

        Args:
            method: HTTP method
            path: Path relative to the API root, e.g. "conversations/42"
            user_id: Sent as X-User-ID when given
            json: JSON request body
            params: Query parameters
            allow_404: Return None instead of raising on 404

        Raises:
            BackendAPIError: On non-success status or transport failure
        """
        url = f"/{path.lstrip('/')}"
        try:
            response = await self._get_client().request(
                method, url, headers=self._get_headers(user_id), json=json, params=params
            )
        except httpx.HTTPError as e:
            logger.error(
                f"[Backend] {method} {url} failed: {type(e).__name__}: {e}",
                extra={"user_id": user_id},
            )
            raise BackendAPIError(0, str(e) or type(e).__name__, url=url) from e

        if response.status_code == 404 and allow_404:
            logger.debug(f"[Backend] {method} {url} -> 404 (ignored)")
            return None

        if response.is_error:
            logger.error(
                f"[Backend] {method} {url} -> {response.status_code} {response.reason_phrase}",
                extra={"user_id": user_id, "body": response.text[:500]},
            )
            raise BackendAPIError(response.status_code, response.reason_phrase, url=url)

        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
