"""
Rate limited, multi-shop gateway to the Shopify Admin REST and GraphQL APIs
"""

from shopify_gateway.domains.shopify import (
    ShopifyAPIClient,
    ShopifyClientFactory,
    HttpxTransport,
)

__version__ = "1.0.0"

__all__ = [
    "ShopifyAPIClient",
    "ShopifyClientFactory",
    "HttpxTransport",
]
