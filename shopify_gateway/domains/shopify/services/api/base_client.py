"""
Base Shopify API client: admission control, throttle retry and response normalization
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from shopify_gateway.core.config.settings import ShopifySettings
from shopify_gateway.core.exceptions import ConfigurationError, TransportError
from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.constants.shopify import (
    ACCESS_TOKEN_HEADER,
    GRAPHQL_ENDPOINT_TEMPLATE,
    HTTP_TOO_MANY_REQUESTS,
    THROTTLED_ERROR_CODE,
)
from shopify_gateway.shared.helpers import extract_page_info, parse_link_header

from ...interfaces.api_client import IShopifyAPIClient
from ...interfaces.transport import ITransport, TransportResponse
from ..rate_limit import (
    Clock,
    GraphQLRateLimiter,
    RestRateLimiter,
    TenantRateState,
    TenantRegistry,
)
from . import pagination

logger = get_logger(__name__)


@dataclass
class ClientContext:
    """Collaborators shared by every client created from one factory"""

    settings: ShopifySettings
    transport: ITransport
    registry: TenantRegistry
    rest_limiter: RestRateLimiter
    graphql_limiter: GraphQLRateLimiter
    clock: Clock


def normalize_shop_domain(shop: str) -> str:
    """Reduce ``https://name.myshopify.com/`` style input to ``name.myshopify.com``"""
    return (
        (shop or "")
        .strip()
        .replace("https://", "")
        .replace("http://", "")
        .rstrip("/")
    )


def is_throttled(response: Dict[str, Any]) -> bool:
    """A 429, or a GraphQL body whose first error is THROTTLED"""
    if response.get("http_status") == HTTP_TOO_MANY_REQUESTS:
        return True

    errors = response.get("errors")
    if not isinstance(errors, list) or not errors:
        return False
    first = errors[0]
    if not isinstance(first, dict):
        return False
    extensions = first.get("extensions") or {}
    return extensions.get("code") == THROTTLED_ERROR_CODE


def normalize_response(response: Optional[TransportResponse]) -> Dict[str, Any]:
    """
    Merge the JSON body with ``http_status``, ``headers`` and Link-header tokens.

    A missing response (transport failure) becomes ``http_status`` 0 with no
    body; a body that is not JSON leaves only the status and headers.
    """
    if response is None:
        return {"http_status": 0, "headers": {}}

    body = response.json_body
    normalized: Dict[str, Any] = dict(body) if isinstance(body, dict) else {}
    if body is not None and not isinstance(body, dict):
        normalized["body"] = body

    normalized["http_status"] = response.status
    normalized["headers"] = dict(response.headers)

    links = parse_link_header(response.headers.get("link"))
    next_page = extract_page_info(links["next"]) if "next" in links else None
    previous_page = extract_page_info(links["previous"]) if "previous" in links else None
    if next_page:
        normalized["next_page"] = next_page
    if previous_page:
        normalized["previous_page"] = previous_page

    return normalized


class BaseShopifyAPIClient(IShopifyAPIClient):
    """Rate limited REST and GraphQL access to a single shop"""

    def __init__(
        self,
        shop: str,
        access_token: str = "",
        context: Optional[ClientContext] = None,
        api_key: Optional[str] = None,
    ):
        if context is None:
            raise ConfigurationError(
                "Clients must be created through ShopifyClientFactory",
                config_key="context",
            )
        self.shop = normalize_shop_domain(shop)
        if not self.shop:
            raise ConfigurationError("A shop domain is required", config_key="shop")

        self.access_token = access_token
        self.context = context
        self.settings = context.settings
        self.api_version = context.settings.SHOPIFY_API_VERSION
        self.api_key = api_key if api_key is not None else context.settings.SHOPIFY_API_KEY

        # Allocated once per shop and shared by every client for that shop
        self.rate_state: TenantRateState = context.registry.get(self.shop)

    @property
    def base_url(self) -> str:
        return f"https://{self.shop}"

    def api_path(self, resource: str) -> str:
        """``admin/api/{version}/{resource}``"""
        return f"admin/api/{self.api_version}/{resource.lstrip('/')}"

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _headers(self, content_type: str) -> Dict[str, str]:
        headers = {
            "Content-Type": content_type,
            "Accept": "application/json",
        }
        if self.access_token:
            headers[ACCESS_TOKEN_HEADER] = self.access_token
        return headers

    async def get(self, endpoint: str) -> Dict[str, Any]:
        return await self.request(endpoint, "GET", None)

    async def put(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, "PUT", data)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, "POST", data)

    async def delete(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, "DELETE", data)

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a REST request, waiting for admission and retrying while throttled"""
        method = method.upper()
        url = self._url(endpoint)
        headers = self._headers("application/json")
        body = None
        if method not in ("GET", "HEAD"):
            body = json.dumps(data if data is not None else {})

        while True:
            await self.context.rest_limiter.acquire(self.rate_state)
            normalized = normalize_response(await self._send(url, method, headers, body))
            if not is_throttled(normalized):
                return normalized
            await self._cool_down(method, endpoint, normalized)

    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run a GraphQL document under cost-based admission, retrying while throttled"""
        endpoint = endpoint or GRAPHQL_ENDPOINT_TEMPLATE.format(version=self.api_version)
        url = self._url(endpoint)
        if variables is None:
            headers = self._headers("application/graphql")
            body: Union[str, bytes] = query
        else:
            headers = self._headers("application/json")
            body = json.dumps({"query": query, "variables": variables})

        limiter = self.context.graphql_limiter
        while True:
            operation = await limiter.acquire(self.rate_state)
            response: Optional[TransportResponse] = None
            try:
                response = await self._send(url, "POST", headers, body)
            finally:
                limiter.complete(
                    self.rate_state,
                    operation,
                    response.json_body if response is not None else None,
                    response.status if response is not None else None,
                )
            limiter.settle(self.rate_state, operation)

            normalized = normalize_response(response)
            if not is_throttled(normalized):
                return normalized
            await self._cool_down("POST", endpoint, normalized)

    async def walk(
        self, fetch_page: pagination.PageFetcher, on_item: pagination.ItemCallback
    ) -> pagination.WalkResult:
        """Stream every item of a paginated resource to ``on_item``"""
        return await pagination.walk(
            fetch_page,
            on_item,
            self.settings.PAGINATION_EMPTY_PAGE_RETRIES,
            self.settings.THROTTLE_RETRY_DELAY,
            self.context.clock.sleep,
        )

    async def collect_all(self, fetch_page: pagination.PageFetcher) -> List[Any]:
        """Buffer every item of a paginated resource"""
        return await pagination.collect_all(
            fetch_page,
            self.settings.PAGINATION_EMPTY_PAGE_RETRIES,
            self.settings.THROTTLE_RETRY_DELAY,
            self.context.clock.sleep,
        )

    def telemetry(self) -> Dict[str, Optional[float]]:
        """Recent rate limiter averages for this shop"""
        return self.rate_state.telemetry()

    async def _send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Union[str, bytes]],
    ) -> Optional[TransportResponse]:
        try:
            response = await self.context.transport.send(url, method, headers, body)
        except TransportError as e:
            logger.error(
                "Shopify request failed",
                shop=self.shop,
                method=method,
                url=url,
                error=str(e),
            )
            return None

        if response.json_body is None and response.text:
            logger.warning(
                "Shopify response was not valid JSON",
                shop=self.shop,
                method=method,
                url=url,
                status=response.status,
            )
        return response

    async def _cool_down(
        self, method: str, endpoint: str, response: Dict[str, Any]
    ) -> None:
        delay = self.settings.THROTTLE_RETRY_DELAY
        logger.warning(
            "Shopify throttled request, retrying",
            shop=self.shop,
            method=method,
            endpoint=endpoint,
            status=response.get("http_status"),
            retry_in_seconds=delay,
        )
        await self.context.clock.sleep(delay)
