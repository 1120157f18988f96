"""
REST admission control: fixed one-second window per shop
"""

from typing import Optional

from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.constants.shopify import (
    REST_WINDOW_SECONDS,
    REST_COOLDOWN_SECONDS,
)
from .clock import Clock
from .gate import MutualExclusionGate
from .state import TenantRateState

logger = get_logger(__name__)


class RestRateLimiter:
    """
    Keeps each shop under ``rest_max_per_second`` REST calls.

    Once a window is full the caller waits until ``cooldown`` seconds have
    passed since the last admitted request, then a fresh window starts. The
    cool-down is longer than the window to absorb clock skew and response
    latency on Shopify's side.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        gate: Optional[MutualExclusionGate] = None,
        window: float = REST_WINDOW_SECONDS,
        cooldown: float = REST_COOLDOWN_SECONDS,
    ):
        self.clock = clock or Clock()
        self.gate = gate or MutualExclusionGate("rest")
        self.window = window
        self.cooldown = cooldown

    async def acquire(self, state: TenantRateState) -> None:
        """Return once a REST request for ``state.shop`` may be sent"""
        async with self.gate.hold(state.shop):
            now = self.clock.now()
            in_window = (
                state.rest_window_start is not None
                and now < state.rest_window_start + self.window
            )

            if in_window and state.rest_queries_this_window >= state.rest_max_per_second:
                wait = state.rest_last_request_time + self.cooldown - now
                logger.info(
                    "REST rate limit reached, waiting",
                    shop=state.shop,
                    queries_this_window=state.rest_queries_this_window,
                    wait_seconds=round(max(wait, 0.0), 3),
                )
                await self.clock.sleep(wait)
                self._start_window(state, self.clock.now())
            elif not in_window:
                self._start_window(state, now)
            else:
                state.rest_queries_this_window += 1
                state.rest_last_request_time = now

    def _start_window(self, state: TenantRateState, now: float) -> None:
        if state.rest_window_start is not None:
            state.queries_per_second.push(state.rest_queries_this_window)
        state.rest_window_start = now
        state.rest_queries_this_window = 1
        state.rest_last_request_time = now
