"""
Shopify services package
"""

from .api_client import ShopifyAPIClient
from .factory import ShopifyClientFactory
from .transport import HttpxTransport

__all__ = [
    "ShopifyAPIClient",
    "ShopifyClientFactory",
    "HttpxTransport",
]
