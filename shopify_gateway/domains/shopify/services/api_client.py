"""
Main Shopify API client combining the specialized clients
"""

from .api import AppAPIClient, OrderAPIClient, ProductAPIClient


class ShopifyAPIClient(ProductAPIClient, OrderAPIClient, AppAPIClient):
    """
    Everything a caller needs for one shop: raw ``get``/``put``/``post``/
    ``delete``/``graphql`` calls, pagination helpers, and the product,
    order and app helpers. Create it through ``ShopifyClientFactory.client``.
    """
