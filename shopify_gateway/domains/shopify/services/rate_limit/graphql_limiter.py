"""
GraphQL admission control: concurrency cap plus Shopify's cost bucket
"""

import asyncio
import math
from typing import Any, Dict, Optional

from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.constants.shopify import THROTTLE_RETRY_DELAY_SECONDS
from .clock import Clock
from .gate import MutualExclusionGate
from .state import TenantRateState, ThrottleStatus, reported_query_cost

logger = get_logger(__name__)


class PendingGraphQLOperation:
    """A GraphQL request between admission and cost settlement"""

    def __init__(self, shop: str, started_at: float):
        self.shop = shop
        self.started_at = started_at
        self.completed_at: Optional[float] = None
        self.response: Optional[Dict[str, Any]] = None
        self.status: Optional[int] = None
        self.settled = False
        self._done = asyncio.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    async def wait(self) -> None:
        await self._done.wait()

    def __repr__(self) -> str:
        return (
            f"PendingGraphQLOperation(shop={self.shop!r}, started_at={self.started_at}, "
            f"done={self.done}, settled={self.settled})"
        )


class GraphQLRateLimiter:
    """
    Admits GraphQL requests for a shop while both of these hold:

    * fewer than ``graphql_max_concurrent`` requests would be in flight,
      otherwise every in-flight request is awaited and its cost folded in
      before admission is re-evaluated;
    * the last reported bucket has at least ``graphql_max_cost_per_request``
      points available, otherwise the caller sleeps until the bucket has
      linearly restored to its maximum.

    The bucket snapshot is only replaced by one observed at the same time or
    later, so responses arriving out of order never roll it back.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        gate: Optional[MutualExclusionGate] = None,
        fallback_wait: float = THROTTLE_RETRY_DELAY_SECONDS,
    ):
        self.clock = clock or Clock()
        self.gate = gate or MutualExclusionGate("graphql")
        # Used when Shopify reports a restore rate of zero
        self.fallback_wait = fallback_wait

    async def acquire(self, state: TenantRateState) -> PendingGraphQLOperation:
        """Wait for admission and register the new in-flight operation"""
        async with self.gate.hold(state.shop):
            while True:
                in_flight = len(state.graphql_in_flight)
                state.concurrency.push(in_flight)

                if in_flight and in_flight + 1 >= state.graphql_max_concurrent:
                    await self._drain_in_flight(state)
                    continue
                break

            status = state.graphql_throttle_status
            if (
                status is not None
                and status.currently_available < state.graphql_max_cost_per_request
            ):
                await self._wait_for_refill(state, status)

            operation = PendingGraphQLOperation(state.shop, self.clock.now())
            state.graphql_in_flight.add(operation)
            return operation

    def complete(
        self,
        state: TenantRateState,
        operation: PendingGraphQLOperation,
        response: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ) -> None:
        """
        Record the outcome and drop the operation from the in-flight set.

        Runs without awaiting, so it needs no gate: nothing can interleave
        between the removal and the completion signal.
        """
        if operation.done:
            return
        operation.completed_at = self.clock.now()
        operation.response = response
        operation.status = status
        state.graphql_in_flight.discard(operation)
        operation._done.set()

    def settle(
        self, state: TenantRateState, operation: PendingGraphQLOperation
    ) -> None:
        """
        Fold a completed operation's reported cost into the bucket; idempotent.

        Like ``complete`` this never awaits, so it does not wait for the gate
        and a finished caller is never held behind another caller's
        admission wait.
        """
        self._fold(state, operation)

    async def _drain_in_flight(self, state: TenantRateState) -> None:
        pending = list(state.graphql_in_flight)
        logger.info(
            "GraphQL concurrency limit reached, waiting for in-flight queries",
            shop=state.shop,
            in_flight=len(pending),
            max_concurrent=state.graphql_max_concurrent,
        )
        await asyncio.gather(*(operation.wait() for operation in pending))
        for operation in sorted(pending, key=lambda op: op.completed_at):
            self._fold(state, operation)

    async def _wait_for_refill(
        self, state: TenantRateState, status: ThrottleStatus
    ) -> None:
        deficit = status.maximum_available - status.currently_available
        if status.restore_rate > 0:
            wait = math.ceil(deficit / status.restore_rate)
        else:
            wait = self.fallback_wait
        logger.info(
            "GraphQL cost bucket low, waiting for refill",
            shop=state.shop,
            currently_available=status.currently_available,
            maximum_available=status.maximum_available,
            restore_rate=status.restore_rate,
            wait_seconds=wait,
        )
        await self.clock.sleep(wait)
        # Shopify restores linearly, so the bucket is full after the wait
        status.currently_available = status.maximum_available

    def _fold(self, state: TenantRateState, operation: PendingGraphQLOperation) -> None:
        if operation.settled or not operation.done:
            return
        operation.settled = True

        snapshot = ThrottleStatus.from_response(operation.response, operation.completed_at)
        if snapshot is None:
            return

        current = state.graphql_throttle_status
        if current is not None and snapshot.observed_at < current.observed_at:
            logger.debug(
                "Discarding stale throttle status",
                shop=state.shop,
                observed_at=snapshot.observed_at,
                stored_at=current.observed_at,
            )
            return

        state.graphql_throttle_status = snapshot
        cost = reported_query_cost(operation.response)
        if cost is not None:
            state.query_cost.push(cost)
