"""
String utility functions for the Shopify gateway
"""

import re
import unicodedata
from typing import Dict, List, Optional
from urllib.parse import parse_qs, quote, urlparse

_LINK_PART = re.compile(r'<([^>]*)>\s*;\s*rel="?([^";]+)"?')


def clean_search(text: str) -> str:
    """Strip diacritics so search terms match Shopify's normalized index"""
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def parse_link_header(value: Optional[str]) -> Dict[str, str]:
    """
    Parse an RFC 8288 Link header into a rel -> URL mapping

    Shopify sends e.g. ``<https://shop/admin/api/.../products.json?page_info=abc>; rel="next"``
    """
    links: Dict[str, str] = {}
    if not value:
        return links

    for url, rel in _LINK_PART.findall(value):
        for name in rel.split():
            links[name] = url
    return links


def extract_page_info(url: str) -> Optional[str]:
    """Return the page_info query parameter of a paginated REST URL"""
    values = parse_qs(urlparse(url).query).get("page_info")
    return values[0] if values else None


def encode_script_src(src: str) -> str:
    """Percent-encode a script URL the way the Admin API stores it"""
    return quote(src, safe=":/?#[]@!$&'()*+,;=%~")


def unique_in_order(values: List[str]) -> List[str]:
    """Drop duplicates while keeping the first occurrence of each value"""
    return list(dict.fromkeys(values))
