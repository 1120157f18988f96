"""
Cursor pagination over the REST and GraphQL Admin APIs

A page fetcher is an async callable taking the previous page's token (None
for the first page) and returning a ``Page``. ``walk`` streams every item to
a callback, ``collect_all`` buffers them. Both run as plain loops, so long
catalogs never grow the call stack.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.constants.shopify import (
    DEFAULT_EMPTY_PAGE_RETRIES,
    DEFAULT_PAGE_SIZE,
)

logger = get_logger(__name__)


@dataclass
class Page:
    """
    One fetched page.

    ``has_data`` is False when the response carried no data envelope at all
    (a transient failure), which is different from a legitimately empty page.
    """

    items: List[Any] = field(default_factory=list)
    next_token: Optional[str] = None
    has_data: bool = True


@dataclass
class WalkResult:
    """
    Outcome of a walk.

    ``complete`` is False when the walk was abandoned after repeated pages
    without a data envelope, so ``delivered`` covers only part of the resource.
    """

    delivered: int = 0
    complete: bool = True


PageFetcher = Callable[[Optional[str]], Awaitable[Page]]
ItemCallback = Callable[[Any], Any]
Sleep = Callable[[float], Awaitable[None]]


async def walk(
    fetch_page: PageFetcher,
    on_item: ItemCallback,
    max_empty_retries: int = DEFAULT_EMPTY_PAGE_RETRIES,
    retry_delay: float = 0.0,
    sleep: Sleep = asyncio.sleep,
) -> WalkResult:
    """
    Fetch pages until exhaustion, handing each item to ``on_item`` as it arrives.

    ``on_item`` may be a plain function or a coroutine function. A page without
    a data envelope is fetched again with the same token after sleeping
    ``retry_delay`` seconds; after ``max_empty_retries`` consecutive misses the
    walk is abandoned and logged.

    Returns:
        WalkResult with the number of items delivered and whether the walk
        reached the end of the resource
    """
    token: Optional[str] = None
    result = WalkResult()
    misses = 0

    while True:
        page = await fetch_page(token)

        if not page.has_data:
            misses += 1
            if misses > max_empty_retries:
                logger.error(
                    "Pagination abandoned after repeated empty responses",
                    token=token,
                    attempts=misses,
                    delivered=result.delivered,
                )
                result.complete = False
                return result
            logger.warning(
                "Page fetch returned no data, retrying",
                token=token,
                attempt=misses,
                retry_in_seconds=retry_delay,
            )
            if retry_delay > 0:
                await sleep(retry_delay)
            continue
        misses = 0

        for item in page.items:
            outcome = on_item(item)
            if inspect.isawaitable(outcome):
                await outcome
            result.delivered += 1

        if not page.items or page.next_token is None:
            return result
        token = page.next_token


async def collect_all(
    fetch_page: PageFetcher,
    max_empty_retries: int = DEFAULT_EMPTY_PAGE_RETRIES,
    retry_delay: float = 0.0,
    sleep: Sleep = asyncio.sleep,
) -> List[Any]:
    """Fetch every page and return all items in order; an abandoned walk is logged"""
    items: List[Any] = []
    await walk(fetch_page, items.append, max_empty_retries, retry_delay, sleep)
    return items


def _with_query(endpoint: str, params: str) -> str:
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}{params}"


def rest_since_id_fetcher(
    client,
    endpoint: str,
    key: str,
    limit: int = DEFAULT_PAGE_SIZE,
) -> PageFetcher:
    """
    Page through a REST collection by ``since_id``.

    Each page starts after the id of the last item seen; the walk ends on
    the first empty page.
    """

    async def fetch(token: Optional[str]) -> Page:
        since = token or "0"
        response = await client.get(
            _with_query(endpoint, f"limit={limit}&since_id={since}")
        )
        if key not in response:
            return Page(has_data=False)
        items = response[key] or []
        next_token = str(items[-1]["id"]) if items else None
        return Page(items=items, next_token=next_token)

    return fetch


def rest_link_fetcher(
    client,
    endpoint: str,
    key: str,
    limit: int = DEFAULT_PAGE_SIZE,
) -> PageFetcher:
    """
    Page through a REST collection by the ``page_info`` token of the Link header.

    The first request may carry filters in ``endpoint``; follow-up requests
    only send ``limit`` and ``page_info``, as Shopify requires.
    """
    base = endpoint.split("?", 1)[0]

    async def fetch(token: Optional[str]) -> Page:
        if token is None:
            path = _with_query(endpoint, f"limit={limit}")
        else:
            path = f"{base}?limit={limit}&page_info={token}"
        response = await client.get(path)
        if key not in response:
            return Page(has_data=False)
        return Page(items=response[key] or [], next_token=response.get("next_page"))

    return fetch


def graphql_cursor_fetcher(
    client,
    query: str,
    connection_path: Sequence[str],
    variables: Optional[Dict[str, Any]] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PageFetcher:
    """
    Page through a GraphQL connection with ``after: cursor``.

    ``query`` must declare ``$first: Int!`` and ``$after: String`` and pass
    them to the connection. ``connection_path`` locates the connection under
    ``data``, e.g. ``("products",)``. Items are the connection's edges; the
    last edge's cursor is the next token while ``pageInfo.hasNextPage`` holds.
    """

    async def fetch(token: Optional[str]) -> Page:
        page_variables = dict(variables or {})
        page_variables["first"] = page_size
        page_variables["after"] = token
        response = await client.graphql(query, page_variables)

        connection = response.get("data")
        for name in connection_path:
            if not isinstance(connection, dict):
                break
            connection = connection.get(name)
        if not isinstance(connection, dict):
            return Page(has_data=False)

        edges = connection.get("edges") or []
        page_info = connection.get("pageInfo") or {}
        next_token = None
        if page_info.get("hasNextPage") and edges:
            next_token = edges[-1].get("cursor")
        return Page(items=edges, next_token=next_token)

    return fetch
