"""
Transport interface for the Shopify gateway
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass
class TransportResponse:
    """Status, headers and decoded body of one HTTP exchange"""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Optional[Any] = None
    text: str = ""


class ITransport(ABC):
    """Sends a single HTTP request and returns whatever came back"""

    @abstractmethod
    async def send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Union[str, bytes]] = None,
    ) -> TransportResponse:
        """
        Send one request

        Args:
            url: Absolute request URL
            method: HTTP method
            headers: Request headers
            body: Already-encoded request body, if any

        Returns:
            The response; ``json_body`` is None when the body is not valid JSON

        Raises:
            TransportError: When no HTTP response was received
        """
        pass
