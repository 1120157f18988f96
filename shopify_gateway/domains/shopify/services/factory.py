"""
Factory owning the per-shop registry and the shared admission controllers
"""

from typing import Optional

from shopify_gateway.core.config import Settings, settings as default_settings
from shopify_gateway.core.logging import get_logger

from ..interfaces.transport import ITransport
from .api.base_client import ClientContext
from .api_client import ShopifyAPIClient
from .rate_limit import (
    Clock,
    GraphQLRateLimiter,
    MutualExclusionGate,
    RestRateLimiter,
    TenantRegistry,
)
from .transport import HttpxTransport

logger = get_logger(__name__)


class ShopifyClientFactory:
    """
    Hands out ``ShopifyAPIClient`` instances that share rate limiting state.

    Clients created for the same shop share one ``TenantRateState``; clients
    for different shops never do.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[ITransport] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or default_settings
        self.config.validate_configuration()
        shopify = self.config.shopify

        self.clock = clock or Clock()
        self.transport = transport or HttpxTransport(
            timeout=shopify.HTTP_TIMEOUT_SECONDS,
            connect_timeout=shopify.HTTP_CONNECT_TIMEOUT_SECONDS,
            user_agent=shopify.USER_AGENT,
        )
        self.registry = TenantRegistry(shopify)
        self.context = ClientContext(
            settings=shopify,
            transport=self.transport,
            registry=self.registry,
            rest_limiter=RestRateLimiter(
                clock=self.clock,
                gate=MutualExclusionGate("rest"),
                window=shopify.REST_WINDOW_SECONDS,
                cooldown=shopify.REST_COOLDOWN_SECONDS,
            ),
            graphql_limiter=GraphQLRateLimiter(
                clock=self.clock,
                gate=MutualExclusionGate("graphql"),
                fallback_wait=shopify.THROTTLE_RETRY_DELAY,
            ),
            clock=self.clock,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    def client(
        self, shop: str, access_token: str = "", api_key: Optional[str] = None
    ) -> ShopifyAPIClient:
        """Client for ``shop``; raises ConfigurationError when the shop is empty"""
        return ShopifyAPIClient(shop, access_token, self.context, api_key=api_key)

    async def close(self):
        """Close the transport if it holds network resources"""
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()
