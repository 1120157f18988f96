"""
Shopify Product API client with full catalog traversal
"""

from typing import Any, Callable, Dict, List, Optional, Union

from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.constants.shopify import TAG_SEPARATOR
from shopify_gateway.shared.helpers import clean_search, unique_in_order

from .base_client import BaseShopifyAPIClient
from .pagination import WalkResult, graphql_cursor_fetcher, rest_since_id_fetcher

logger = get_logger(__name__)

PRODUCT_IDS_QUERY = """
query($first: Int!, $after: String, $query: String) {
    products(first: $first, after: $after, query: $query) {
        pageInfo {
            hasNextPage
            hasPreviousPage
        }
        edges {
            cursor
            node {
                id
            }
        }
    }
}
"""

PRODUCT_TAGS_QUERY = """
query($first: Int!, $query: String) {
    products(first: $first, query: $query) {
        edges {
            node {
                tags
            }
        }
    }
}
"""

PRODUCT_TITLE_SEARCH_QUERY = """
query($first: Int!, $query: String) {
    products(first: $first, query: $query) {
        edges {
            cursor
            node {
                id
                title
                featuredImage {
                    transformedSrc
                }
            }
        }
    }
}
"""


def gid_to_id(gid: str) -> str:
    """``gid://shopify/Product/123`` -> ``123``"""
    return gid.rsplit("/", 1)[-1]


class ProductAPIClient(BaseShopifyAPIClient):
    """Shopify Product API client with full catalog traversal"""

    async def get_product(self, product_id: Union[str, int]) -> Optional[Dict[str, Any]]:
        response = await self.get(self.api_path(f"products/{product_id}.json"))
        return response.get("product")

    async def get_all_products_by_ids(
        self, product_ids: List[Union[str, int]]
    ) -> List[Optional[Dict[str, Any]]]:
        products = []
        for product_id in product_ids:
            products.append(await self.get_product(product_id))
        return products

    async def walk_on_products(
        self, func: Callable[[Dict[str, Any]], Any]
    ) -> WalkResult:
        """
        Stream every product of the shop to ``func`` without buffering the catalog

        Returns:
            WalkResult with the number of products visited and whether the
            whole catalog was reached
        """
        fetcher = rest_since_id_fetcher(
            self, self.api_path("products.json"), "products", self.settings.PAGE_SIZE
        )
        return await self.walk(fetcher, func)

    async def get_all_products(self) -> List[Dict[str, Any]]:
        products: List[Dict[str, Any]] = []
        await self.walk_on_products(products.append)
        return products

    async def get_all_product_ids_by_tag(self, tag: str) -> List[str]:
        fetcher = graphql_cursor_fetcher(
            self,
            PRODUCT_IDS_QUERY,
            ("products",),
            variables={"query": f"tag:{tag}"},
            page_size=self.settings.PAGE_SIZE,
        )
        edges = await self.collect_all(fetcher)
        return [gid_to_id(edge["node"]["id"]) for edge in edges]

    async def get_all_product_ids_by_tags(self, tags: List[str]) -> List[str]:
        """Ids of products carrying any of ``tags``, without duplicates"""
        product_ids: List[str] = []
        for tag in tags:
            product_ids.extend(await self.get_all_product_ids_by_tag(tag))
        return unique_in_order(product_ids)

    async def get_product_id_by_sku(self, sku: str) -> Optional[str]:
        response = await self.graphql(
            PRODUCT_IDS_QUERY, {"first": 1, "after": None, "query": f"sku:{sku}"}
        )
        edges = ((response.get("data") or {}).get("products") or {}).get("edges") or []
        if not edges:
            return None
        return gid_to_id(edges[0]["node"]["id"])

    async def search_products_by_title(
        self, search: str, limit: int = 10
    ) -> List[Dict[str, Any]]:
        search = clean_search(search)
        response = await self.graphql(
            PRODUCT_TITLE_SEARCH_QUERY, {"first": limit, "query": f"*({search})*"}
        )
        edges = ((response.get("data") or {}).get("products") or {}).get("edges") or []

        results = []
        for edge in edges:
            node = edge["node"]
            image = node.get("featuredImage") or {}
            results.append(
                {
                    "id": gid_to_id(node["id"]),
                    "title": node.get("title"),
                    "img": image.get("transformedSrc"),
                }
            )
        return results

    async def search_tags(self, search: str, limit: int = 20) -> List[str]:
        """Distinct product tags containing ``search`` (case-insensitive)"""
        search = clean_search(search)
        response = await self.graphql(
            PRODUCT_TAGS_QUERY, {"first": limit, "query": f"tag:*({search})*"}
        )
        edges = ((response.get("data") or {}).get("products") or {}).get("edges") or []

        needle = search.lower()
        tags: List[str] = []
        for edge in edges:
            for tag in edge["node"].get("tags") or []:
                if tag not in tags and needle in tag.lower():
                    tags.append(tag)
        return tags

    async def add_product_tag(
        self, product_id: Union[str, int], current_tags: str, tags: List[str]
    ) -> Dict[str, Any]:
        tag_list = current_tags.split(TAG_SEPARATOR) if current_tags else []
        tag_list = unique_in_order(tag_list + list(tags))
        return await self._put_tags(product_id, tag_list)

    async def remove_product_tag(
        self, product_id: Union[str, int], current_tags: str, tags: List[str]
    ) -> Dict[str, Any]:
        tag_list = current_tags.split(TAG_SEPARATOR) if current_tags else []
        for tag in tags:
            # Drop the last occurrence only
            for index in range(len(tag_list) - 1, -1, -1):
                if tag_list[index] == tag:
                    del tag_list[index]
                    break
        return await self._put_tags(product_id, tag_list)

    async def delete_product_tag(self, tag: str) -> int:
        """Remove ``tag`` from every product carrying it; returns the number of products touched"""
        product_ids = await self.get_all_product_ids_by_tag(tag)
        touched = 0
        for product_id in product_ids:
            product = await self.get_product(product_id)
            if not product:
                logger.warning(
                    "Product disappeared while deleting tag",
                    shop=self.shop,
                    product_id=product_id,
                    tag=tag,
                )
                continue
            await self.remove_product_tag(product["id"], product.get("tags", ""), [tag])
            touched += 1
        return touched

    async def _put_tags(
        self, product_id: Union[str, int], tag_list: List[str]
    ) -> Dict[str, Any]:
        return await self.put(
            self.api_path(f"products/{product_id}.json"),
            {"product": {"id": product_id, "tags": TAG_SEPARATOR.join(tag_list)}},
        )
