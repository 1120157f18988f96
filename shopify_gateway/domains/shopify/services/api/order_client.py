"""
Shopify Order API client
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .base_client import BaseShopifyAPIClient
from .pagination import graphql_cursor_fetcher

MONEY_BAG_FIELDS = """
    presentmentMoney {
        amount
        currencyCode
    }
    shopMoney {
        amount
        currencyCode
    }
"""

VISIT_FIELDS = """
    landingPage
    marketingEvent {
        app {
            title
        }
        channel
        type
        utmCampaign
        utmMedium
        utmSource
    }
    occurredAt
    referralCode
    referrerUrl
    source
    sourceDescription
    sourceType
    utmParameters {
        campaign
        content
        medium
        source
        term
    }
"""

ORDERS_QUERY = f"""
query($first: Int!, $after: String, $query: String) {{
    orders(first: $first, after: $after, query: $query) {{
        pageInfo {{
            hasNextPage
            hasPreviousPage
        }}
        edges {{
            cursor
            node {{
                name
                app {{
                    name
                }}
                currentSubtotalLineItemsQuantity
                displayFinancialStatus
                displayFulfillmentStatus
                processedAt
                cancelledAt
                email
                phone
                customer {{
                    email
                    phone
                }}
                shippingAddress {{
                    phone
                }}
                shippingLine {{
                    title
                    discountedPriceSet {{ {MONEY_BAG_FIELDS} }}
                }}
                tags
                discountCode
                currentTotalPriceSet {{ {MONEY_BAG_FIELDS} }}
                currentTotalTaxSet {{ {MONEY_BAG_FIELDS} }}
                currentTotalDiscountsSet {{ {MONEY_BAG_FIELDS} }}
                customerJourneySummary {{
                    customerOrderIndex
                    daysToConversion
                    firstVisit {{ {VISIT_FIELDS} }}
                    lastVisit {{ {VISIT_FIELDS} }}
                    momentsCount
                    ready
                }}
            }}
        }}
    }}
}}
"""


def build_orders_search(
    created_at_min: str,
    created_at_max: str,
    status: str = "any",
    financial_status: str = "any",
    fulfillment_status: str = "any",
) -> str:
    """Shopify search syntax for an order date range and status filters"""
    return (
        f"created_at:>={created_at_min} created_at:<={created_at_max} "
        f"financial_status:{financial_status} fulfillment_status:{fulfillment_status} "
        f"status:{status}"
    )


class OrderAPIClient(BaseShopifyAPIClient):
    """Shopify Order API client"""

    async def get_orders(
        self,
        created_at_min: str,
        created_at_max: Optional[str] = None,
        limit: int = 50,
        status: str = "any",
        financial_status: str = "any",
        fulfillment_status: str = "any",
    ) -> List[Dict[str, Any]]:
        """Every order edge created in the given range, following cursors to the end"""
        created_at_max = created_at_max or datetime.now(timezone.utc).isoformat()
        fetcher = graphql_cursor_fetcher(
            self,
            ORDERS_QUERY,
            ("orders",),
            variables={
                "query": build_orders_search(
                    created_at_min,
                    created_at_max,
                    status,
                    financial_status,
                    fulfillment_status,
                )
            },
            page_size=limit,
        )
        return await self.collect_all(fetcher)
