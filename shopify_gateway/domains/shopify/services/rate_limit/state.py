"""
Per-shop rate limiting state and the registry that owns it
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set, TYPE_CHECKING

from shopify_gateway.core.config.settings import ShopifySettings
from shopify_gateway.core.exceptions import ConfigurationError
from shopify_gateway.core.logging import get_logger
from .telemetry import AveragingBuffer

if TYPE_CHECKING:
    from .graphql_limiter import PendingGraphQLOperation

logger = get_logger(__name__)


@dataclass
class ThrottleStatus:
    """Snapshot of a shop's GraphQL cost bucket as reported by Shopify"""

    maximum_available: float
    currently_available: float
    restore_rate: float
    observed_at: float

    @classmethod
    def from_response(
        cls, body: Optional[Dict[str, Any]], observed_at: float
    ) -> Optional["ThrottleStatus"]:
        """Read ``extensions.cost.throttleStatus`` from a GraphQL body, if present"""
        if not isinstance(body, dict):
            return None
        cost = (body.get("extensions") or {}).get("cost") or {}
        status = cost.get("throttleStatus")
        if not status:
            return None
        try:
            return cls(
                maximum_available=float(status["maximumAvailable"]),
                currently_available=float(status["currentlyAvailable"]),
                restore_rate=float(status["restoreRate"]),
                observed_at=observed_at,
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed throttle status", throttle_status=status)
            return None


def reported_query_cost(body: Optional[Dict[str, Any]]) -> Optional[float]:
    """actualQueryCost when Shopify reports it, otherwise requestedQueryCost"""
    if not isinstance(body, dict):
        return None
    cost = (body.get("extensions") or {}).get("cost") or {}
    value = cost.get("actualQueryCost")
    if value is None:
        value = cost.get("requestedQueryCost")
    return float(value) if value is not None else None


@dataclass
class TenantRateState:
    """Mutable rate limiting bookkeeping for exactly one shop"""

    shop: str
    rest_max_per_second: int
    graphql_max_concurrent: int
    graphql_max_cost_per_request: float
    telemetry_window_size: int

    # REST fixed window
    rest_queries_this_window: int = 0
    rest_window_start: Optional[float] = None
    rest_last_request_time: Optional[float] = None

    # GraphQL cost bucket
    graphql_in_flight: Set["PendingGraphQLOperation"] = field(default_factory=set)
    graphql_throttle_status: Optional[ThrottleStatus] = None

    queries_per_second: AveragingBuffer = field(init=False)
    concurrency: AveragingBuffer = field(init=False)
    query_cost: AveragingBuffer = field(init=False)

    def __post_init__(self):
        self.queries_per_second = AveragingBuffer(self.telemetry_window_size)
        self.concurrency = AveragingBuffer(self.telemetry_window_size)
        self.query_cost = AveragingBuffer(self.telemetry_window_size)

    def telemetry(self) -> Dict[str, Optional[float]]:
        """Averages of the recent samples, for diagnostics"""
        return {
            "queries_per_second": self.queries_per_second.average(),
            "graphql_concurrency": self.concurrency.average(),
            "graphql_query_cost": self.query_cost.average(),
        }


class TenantRegistry:
    """Allocates one TenantRateState per shop on first use"""

    def __init__(self, shopify_settings: ShopifySettings):
        self._settings = shopify_settings
        self._states: Dict[str, TenantRateState] = {}

    def get(self, shop: str) -> TenantRateState:
        if not shop:
            raise ConfigurationError(
                "A shop domain is required for rate limiting",
                config_key="shop",
            )

        state = self._states.get(shop)
        if state is None:
            state = TenantRateState(
                shop=shop,
                rest_max_per_second=self._settings.MAX_REST_QUERIES_PER_SECOND,
                graphql_max_concurrent=self._settings.MAX_CONCURRENT_GRAPHQL_QUERIES,
                graphql_max_cost_per_request=self._settings.MAX_GRAPHQL_COST_PER_REQUEST,
                telemetry_window_size=self._settings.TELEMETRY_WINDOW_SIZE,
            )
            self._states[shop] = state
            logger.debug("Allocated rate limit state", shop=shop)
        return state

    def __contains__(self, shop: object) -> bool:
        return shop in self._states

    def __len__(self) -> int:
        return len(self._states)
