"""
Shopify domain interfaces
"""

from .api_client import IShopifyAPIClient
from .transport import ITransport, TransportResponse

__all__ = [
    "IShopifyAPIClient",
    "ITransport",
    "TransportResponse",
]
