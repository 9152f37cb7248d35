"""HTTP adapter for token API operations."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class HTTPAPIClient:
    """
    HTTP client adapter for API calls.

    Implements IAPIClient protocol. Non-2xx responses and transport failures
    are raised as UpstreamError; callers never see raw httpx exceptions.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def post(self, endpoint: str, content: bytes, headers: Mapping[str, str]) -> httpx.Response:
        if not self._client:
            raise RuntimeError("HTTPAPIClient not initialized. Use 'async with' context.")

        try:
            response = await self._client.post(endpoint, content=content, headers=dict(headers))
        except httpx.HTTPError as exc:
            raise UpstreamError(f"request to {endpoint} failed: {exc}") from exc

        logger.debug("POST %s -> %s", endpoint, response.status_code)
        if not response.is_success:
            raise UpstreamError.from_status(response.status_code, response.reason_phrase)

        return response
