"""
Shopify domain for the gateway
"""

from .services import ShopifyAPIClient, ShopifyClientFactory, HttpxTransport

__all__ = [
    "ShopifyAPIClient",
    "ShopifyClientFactory",
    "HttpxTransport",
]
