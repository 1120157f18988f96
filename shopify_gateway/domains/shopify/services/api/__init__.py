"""
Shopify API clients package
"""

from .base_client import BaseShopifyAPIClient, ClientContext
from .product_client import ProductAPIClient
from .order_client import OrderAPIClient
from .app_client import AppAPIClient
from .pagination import (
    Page,
    WalkResult,
    walk,
    collect_all,
    rest_since_id_fetcher,
    rest_link_fetcher,
    graphql_cursor_fetcher,
)

__all__ = [
    "BaseShopifyAPIClient",
    "ClientContext",
    "ProductAPIClient",
    "OrderAPIClient",
    "AppAPIClient",
    "Page",
    "WalkResult",
    "walk",
    "collect_all",
    "rest_since_id_fetcher",
    "rest_link_fetcher",
    "graphql_cursor_fetcher",
]
