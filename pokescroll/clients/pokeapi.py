"""
PokeAPI transport.

A single `get(url) -> JSON object` primitive over httpx. Every failure
surfaces as RequestError; HTTP 404 is distinguishable through
`RequestError.not_found`.

API docs: https://pokeapi.co/docs/v2
"""

import logging
from typing import Any

import httpx

from pokescroll.config import settings
from pokescroll.models.errors import RequestError

logger = logging.getLogger(__name__)


class PokeAPIClient:
    """
    Client for the PokeAPI REST service.

    Reuses one httpx.AsyncClient for every request. Use as an async context
    manager, or call aclose() when done.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the PokeAPI client.

        Args:
            base_url: API base URL. Defaults to settings.api_base_url.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
            client: Optional httpx client to share. It is not closed by aclose().
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "PokeAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": settings.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def url(self, *parts: str) -> str:
        """Join path segments onto the base URL."""
        return "/".join([self.base_url, *(p.strip("/") for p in parts)])

    async def get(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        GET a URL and decode its JSON object body.

        Args:
            url: Absolute URL to fetch
            params: Optional query string parameters

        Returns:
            Decoded JSON object

        Raises:
            RequestError: On network failure, non-2xx status or a body that
                is not a JSON object
        """
        if not url:
            raise RequestError(url, reason="url is required")

        logger.debug("GET %s %s", url, params or "")

        try:
            response = await self._get_client().get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RequestError(url, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise RequestError(url, reason=str(e) or type(e).__name__) from e

        try:
            data = response.json()
        except ValueError as e:
            raise RequestError(url, status_code=response.status_code, reason="invalid JSON") from e

        if not isinstance(data, dict):
            raise RequestError(url, status_code=response.status_code, reason="expected a JSON object")

        return data
