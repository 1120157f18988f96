"""
Custom exceptions for the Shopify gateway
"""

from .base import ShopifyGatewayException
from .config import ConfigurationError, ConfigurationValidationError
from .transport import TransportError

__all__ = [
    "ShopifyGatewayException",
    "ConfigurationError",
    "ConfigurationValidationError",
    "TransportError",
]
