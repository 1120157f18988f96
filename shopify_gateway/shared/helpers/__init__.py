"""
Helpers module for the Shopify gateway
"""

from .string_utils import (
    clean_search,
    parse_link_header,
    extract_page_info,
    encode_script_src,
    unique_in_order,
)


__all__ = [
    "clean_search",
    "parse_link_header",
    "extract_page_info",
    "encode_script_src",
    "unique_in_order",
]
