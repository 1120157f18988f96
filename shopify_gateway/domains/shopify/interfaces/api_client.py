"""
Shopify API client interface for the Shopify gateway
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class IShopifyAPIClient(ABC):
    """Interface for rate limited Shopify Admin API operations on one shop"""

    @abstractmethod
    async def get(self, endpoint: str) -> Dict[str, Any]:
        """GET a REST endpoint relative to the shop root"""
        pass

    @abstractmethod
    async def put(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """PUT a JSON body to a REST endpoint"""
        pass

    @abstractmethod
    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a JSON body to a REST endpoint"""
        pass

    @abstractmethod
    async def delete(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """DELETE a REST endpoint"""
        pass

    @abstractmethod
    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query or mutation

        Args:
            query: GraphQL document
            variables: Optional variables; sent as a JSON body when given
            endpoint: Override for the GraphQL endpoint path

        Returns:
            Normalized response: the body plus ``http_status`` and ``headers``
        """
        pass
