"""
Constants module for the Shopify gateway
"""

from .shopify import *
