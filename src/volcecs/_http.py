"""
HTTP client utilities for the VolcEngine ECS node
"""

import httpx
from typing import Optional, Dict, Any


class HttpClient:
    """
    HTTP client wrapper with connection pooling.

    Requests are sent once; retry policy belongs to the caller.
    """

    def __init__(
        self,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=100),
            transport=transport,
        )

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
        params: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Send a request with headers and body passed through verbatim.

        Raises httpx.RequestError on transport failures; HTTP error statuses
        are returned, not raised.
        """
        return await self._client.request(
            method,
            url,
            headers=headers,
            content=content,
            params=params or None,
            **kwargs
        )

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
