"""
Transport-related exceptions
"""

from typing import Optional

from .base import ShopifyGatewayException


class TransportError(ShopifyGatewayException):
    """Raised by a transport when a request never produced an HTTP response"""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None,
    ):
        transport_details = {"url": url, "method": method}
        if details:
            transport_details.update(details)
        super().__init__(message, "TRANSPORT_ERROR", transport_details, cause)
        self.url = url
        self.method = method
