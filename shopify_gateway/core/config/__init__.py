"""
Configuration module for the Shopify gateway
"""

from .settings import settings, Settings, build_settings
from .settings import ShopifySettings, LoggingSettings

__all__ = [
    "settings",
    "Settings",
    "build_settings",
    "ShopifySettings",
    "LoggingSettings",
]
