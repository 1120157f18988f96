"""
Per-shop admission control for the Shopify REST and GraphQL APIs
"""

from .clock import Clock
from .gate import MutualExclusionGate
from .graphql_limiter import GraphQLRateLimiter, PendingGraphQLOperation
from .rest_limiter import RestRateLimiter
from .state import TenantRateState, TenantRegistry, ThrottleStatus
from .telemetry import AveragingBuffer

__all__ = [
    "Clock",
    "MutualExclusionGate",
    "GraphQLRateLimiter",
    "PendingGraphQLOperation",
    "RestRateLimiter",
    "TenantRateState",
    "TenantRegistry",
    "ThrottleStatus",
    "AveragingBuffer",
]
