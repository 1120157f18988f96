"""
Shared fixtures for the gateway tests
"""

import pytest

from shopify_gateway.core.config import build_settings
from shopify_gateway.core.exceptions import TransportError
from shopify_gateway.domains.shopify.services import ShopifyClientFactory

from fakes import FakeClock, FakeTransport


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_factory(clock, transport):
    """Build a factory over the fake clock and transport with Shopify overrides"""

    def _make(**overrides):
        return ShopifyClientFactory(
            config=build_settings(**overrides), transport=transport, clock=clock
        )

    return _make


@pytest.fixture
def factory(make_factory):
    return make_factory()


@pytest.fixture
def client(factory):
    return factory.client("alpha.myshopify.com", "shpat_test_token")


@pytest.fixture
def network_error():
    return TransportError("connection reset", url="https://alpha.myshopify.com/x", method="GET")
