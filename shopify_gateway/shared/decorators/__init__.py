"""
Decorators module for the Shopify gateway
"""

from .timing import async_timing

__all__ = [
    "async_timing",
]
