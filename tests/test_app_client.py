"""
Tests for script tag installation, billing plans and order retrieval
"""

import json
from types import SimpleNamespace

import pytest

from shopify_gateway.core.exceptions import ConfigurationError
from shopify_gateway.domains.shopify.services.api import app_client as app_client_module
from shopify_gateway.domains.shopify.services.api.order_client import build_orders_search

from fakes import graphql_body, json_response

SCRIPT_A = "https://cdn.example.com/widget/a.js"
SCRIPT_B = "https://cdn.example.com/widget/b.js"


@pytest.fixture
def app_client(factory):
    return factory.client("alpha.myshopify.com", "token", api_key="app-key-123")


class TestScriptTags:
    @pytest.mark.asyncio
    async def test_installs_missing_scripts_only(self, app_client, transport):
        transport.queue(
            json_response({"script_tags": [{"id": 9, "src": SCRIPT_A}]}),
            json_response({"script_tag": {"id": 10}}, status=201),
        )

        await app_client.include_scripts([SCRIPT_A, SCRIPT_B], cache=True)

        assert [call.method for call in transport.calls] == ["GET", "POST"]
        assert transport.calls[1].json == {
            "script_tag": {"event": "onload", "src": SCRIPT_B, "cache": True}
        }

    @pytest.mark.asyncio
    async def test_nothing_to_install(self, app_client, transport):
        transport.queue(json_response({"script_tags": [{"id": 9, "src": SCRIPT_A}]}))

        await app_client.include_scripts([SCRIPT_A])

        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_update_busts_cache_of_installed_scripts(
        self, app_client, transport, monkeypatch
    ):
        monkeypatch.setattr(
            app_client_module, "time", SimpleNamespace(time=lambda: 1700000000.5)
        )
        transport.queue(
            json_response(
                {
                    "script_tags": [
                        {"id": 9, "src": SCRIPT_A},
                        {"id": 11, "src": "https://other.example.com/x.js"},
                    ]
                }
            ),
            json_response({"script_tag": {"id": 9}}),
        )

        await app_client.include_scripts([SCRIPT_A, SCRIPT_B], update=True)

        assert [call.method for call in transport.calls] == ["GET", "PUT"]
        put = transport.calls[1]
        assert put.url.endswith("/admin/api/2022-01/script_tags/9.json")
        assert put.json == {
            "script_tag": {
                "id": 9,
                "src": f"{SCRIPT_A}?scriptTime=1700000000500",
                "cache": False,
            }
        }


class TestPlans:
    def test_app_url(self, app_client):
        assert app_client.app_url == "https://alpha.myshopify.com/admin/apps/app-key-123"

    def test_app_url_requires_api_key(self, make_factory):
        client = make_factory(SHOPIFY_API_KEY="").client("alpha.myshopify.com", "token")

        with pytest.raises(ConfigurationError):
            client.app_url

    def test_api_key_from_settings(self, make_factory):
        client = make_factory(SHOPIFY_API_KEY="from-env").client("alpha.myshopify.com")

        assert client.app_url.endswith("/admin/apps/from-env")

    @pytest.mark.asyncio
    async def test_get_plans(self, app_client, transport):
        charges = [{"id": 1, "name": "Basic", "status": "active"}]
        transport.queue(json_response({"recurring_application_charges": charges}))

        assert await app_client.get_plans() == charges

    @pytest.mark.asyncio
    async def test_create_plan_returns_to_app(self, app_client, transport):
        transport.queue(
            json_response(
                {"recurring_application_charge": {"id": 5, "status": "pending"}},
                status=201,
            )
        )

        charge = await app_client.create_plan("Pro", 19.99, trial_days=7)

        assert charge == {"id": 5, "status": "pending"}
        assert transport.calls[0].json == {
            "recurring_application_charge": {
                "name": "Pro",
                "price": 19.99,
                "return_url": "https://alpha.myshopify.com/admin/apps/app-key-123",
                "trial_days": 7,
            }
        }

    @pytest.mark.asyncio
    async def test_plan_status_and_url(self, app_client, transport):
        charge = {
            "recurring_application_charge": {
                "id": 5,
                "status": "accepted",
                "confirmation_url": "https://alpha.myshopify.com/admin/charges/5/confirm",
            }
        }
        transport.queue(json_response(charge), json_response(charge))

        assert await app_client.get_plan_status("5") == "accepted"
        assert await app_client.get_plan_url("5") == (
            "https://alpha.myshopify.com/admin/charges/5/confirm"
        )
        assert transport.calls[0].url.endswith("/recurring_application_charges/5.json")

    @pytest.mark.asyncio
    async def test_unknown_plan(self, app_client, transport):
        transport.queue(json_response({"errors": "Not Found"}, status=404))

        assert await app_client.get_plan_status("999") is None


class TestOrders:
    @staticmethod
    def orders_page(names, has_next):
        return graphql_body(
            {
                "orders": {
                    "pageInfo": {"hasNextPage": has_next, "hasPreviousPage": False},
                    "edges": [
                        {"cursor": f"cursor-{name}", "node": {"name": name}}
                        for name in names
                    ],
                }
            }
        )

    def test_search_string(self):
        search = build_orders_search(
            "2024-01-01", "2024-01-31", financial_status="paid"
        )

        assert search == (
            "created_at:>=2024-01-01 created_at:<=2024-01-31 "
            "financial_status:paid fulfillment_status:any status:any"
        )

    @pytest.mark.asyncio
    async def test_get_orders_follows_cursors(self, client, transport):
        transport.queue(
            json_response(self.orders_page(["#1001", "#1002"], True)),
            json_response(self.orders_page(["#1003"], False)),
        )

        orders = await client.get_orders("2024-01-01", "2024-01-31", limit=2)

        assert [edge["node"]["name"] for edge in orders] == ["#1001", "#1002", "#1003"]
        first, second = (json.loads(call.body)["variables"] for call in transport.calls)
        assert first["first"] == 2
        assert first["query"] == build_orders_search("2024-01-01", "2024-01-31")
        assert second["after"] == "cursor-#1002"

    @pytest.mark.asyncio
    async def test_open_ended_range(self, client, transport):
        transport.queue(json_response(self.orders_page([], False)))

        assert await client.get_orders("2024-01-01") == []
        query = json.loads(transport.calls[0].body)["variables"]["query"]
        assert query.startswith("created_at:>=2024-01-01 created_at:<=")
