"""
httpx-backed transport for Shopify Admin API requests
"""

import json
from typing import Dict, Optional, Union

import httpx

from shopify_gateway.core.exceptions import TransportError
from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.decorators import async_timing

from ..interfaces.transport import ITransport, TransportResponse

logger = get_logger(__name__)


class HttpxTransport(ITransport):
    """Transport built on a shared ``httpx.AsyncClient``"""

    def __init__(
        self,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        user_agent: str = "ShopifyGateway/1.0",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self.user_agent = user_agent
        self.http_client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def connect(self):
        """Initialize HTTP client"""
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            self._owns_client = True

    async def close(self):
        """Close HTTP client"""
        if self.http_client and self._owns_client:
            await self.http_client.aclose()
            self.http_client = None

    @async_timing(threshold_ms=5000)
    async def send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Union[str, bytes]] = None,
    ) -> TransportResponse:
        await self.connect()

        try:
            response = await self.http_client.request(
                method, url, headers=headers, content=body
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {url} failed: {e}",
                url=url,
                method=method,
                cause=e,
            ) from e

        try:
            json_body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            json_body = None

        return TransportResponse(
            status=response.status_code,
            headers={key.lower(): value for key, value in response.headers.items()},
            json_body=json_body,
            text=response.text,
        )
