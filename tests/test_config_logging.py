"""
Tests for settings loading and the structured logging setup
"""

import json
import logging

import pytest

from shopify_gateway.core.config import (
    LoggingSettings,
    Settings,
    ShopifySettings,
    build_settings,
)
from shopify_gateway.core.exceptions import (
    ConfigurationValidationError,
    ShopifyGatewayException,
    TransportError,
)
from shopify_gateway.core.logging import (
    JSONFormatter,
    StructuredFormatter,
    LoggingConfig,
    get_logger,
    logging_config_from_settings,
    setup_logging,
)
from shopify_gateway.core.logging.config import ConsoleHandlerConfig, FileHandlerConfig


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSettings:
    def test_defaults(self, monkeypatch):
        for key in ("MAX_REST_QUERIES_PER_SECOND", "SHOPIFY_API_VERSION", "PAGE_SIZE"):
            monkeypatch.delenv(key, raising=False)

        shopify = ShopifySettings(_env_file=None)

        assert shopify.SHOPIFY_API_VERSION == "2022-01"
        assert shopify.MAX_REST_QUERIES_PER_SECOND == 2
        assert shopify.REST_COOLDOWN_SECONDS == 1.5
        assert shopify.MAX_CONCURRENT_GRAPHQL_QUERIES == 5
        assert shopify.MAX_GRAPHQL_COST_PER_REQUEST == 1000.0
        assert shopify.THROTTLE_RETRY_DELAY == 1.0
        assert shopify.PAGE_SIZE == 250
        assert shopify.PAGINATION_EMPTY_PAGE_RETRIES == 10
        assert shopify.TELEMETRY_WINDOW_SIZE == 100

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_REST_QUERIES_PER_SECOND", "4")
        monkeypatch.setenv("SHOPIFY_API_VERSION", "2023-10")

        shopify = ShopifySettings(_env_file=None)

        assert shopify.MAX_REST_QUERIES_PER_SECOND == 4
        assert shopify.SHOPIFY_API_VERSION == "2023-10"

    def test_blank_api_version_falls_back(self):
        assert ShopifySettings(SHOPIFY_API_VERSION="").SHOPIFY_API_VERSION == "2022-01"

    def test_build_settings_overrides(self):
        built = build_settings(MAX_CONCURRENT_GRAPHQL_QUERIES=8, PAGE_SIZE=50)

        assert isinstance(built, Settings)
        assert built.shopify.MAX_CONCURRENT_GRAPHQL_QUERIES == 8
        assert built.shopify.PAGE_SIZE == 50

    def test_top_level_settings_only_group_sections(self):
        assert set(Settings.model_fields) == {"shopify", "logging"}

    def test_all_problems_reported_together(self):
        with pytest.raises(ConfigurationValidationError) as exc_info:
            build_settings(PAGE_SIZE=0, REST_COOLDOWN_SECONDS=-1.0)

        errors = exc_info.value.details["validation_errors"]
        assert len(errors) == 2
        assert "PAGE_SIZE" in str(exc_info.value)


class TestExceptions:
    def test_to_dict(self):
        cause = ConnectionResetError("reset")
        error = TransportError(
            "request failed", url="https://a.myshopify.com/x", method="GET", cause=cause
        )

        payload = error.to_dict()

        assert isinstance(error, ShopifyGatewayException)
        assert payload["error_code"] == "TRANSPORT_ERROR"
        assert payload["exception_type"] == "TransportError"
        assert payload["cause"] == "reset"
        assert payload["details"]["url"] == "https://a.myshopify.com/x"
        assert str(error) == "[TRANSPORT_ERROR] request failed"


class TestStructuredLogging:
    def test_keyword_fields_rendered(self, caplog):
        caplog.set_level(logging.INFO, logger="shopify_gateway.tests")
        logger = get_logger("shopify_gateway.tests")

        logger.info(
            "Shopify throttled request",
            shop="alpha.myshopify.com",
            reason="too many calls",
            ignored=None,
        )

        assert caplog.records[-1].getMessage() == (
            'Shopify throttled request | shop=alpha.myshopify.com | reason="too many calls"'
        )

    def test_debug_skipped_when_disabled(self, caplog):
        caplog.set_level(logging.INFO, logger="shopify_gateway.tests.quiet")

        get_logger("shopify_gateway.tests.quiet").debug("hidden", value=1)

        assert not [r for r in caplog.records if r.name == "shopify_gateway.tests.quiet"]

    def test_json_formatter(self):
        record = logging.LogRecord(
            "shopify_gateway.tests", logging.WARNING, __file__, 10, "slow | ms=12", None, None
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "slow | ms=12"
        assert entry["logger"] == "shopify_gateway.tests"

    def test_keyword_fields_become_json_keys(self, caplog):
        caplog.set_level(logging.INFO, logger="shopify_gateway.tests.json")

        get_logger("shopify_gateway.tests.json").warning(
            "GraphQL cost bucket low", shop="alpha.myshopify.com", wait_seconds=18, ignored=None
        )
        record = caplog.records[-1]

        entry = json.loads(JSONFormatter().format(record))
        assert entry["shop"] == "alpha.myshopify.com"
        assert entry["wait_seconds"] == 18
        assert entry["message"] == "GraphQL cost bucket low"
        assert "ignored" not in entry

        structured = json.loads(StructuredFormatter().format(record))
        assert structured["shop"] == "alpha.myshopify.com"
        assert structured["level"] == "WARNING"
        assert "source" in structured

    def test_keyword_fields_do_not_replace_base_keys(self, caplog):
        caplog.set_level(logging.INFO, logger="shopify_gateway.tests.json")

        get_logger("shopify_gateway.tests.json").info("admitted", level="custom")

        entry = json.loads(JSONFormatter().format(caplog.records[-1]))
        assert entry["level"] == "INFO"

    def test_config_from_settings(self):
        config = logging_config_from_settings(
            LoggingSettings(
                LOG_LEVEL="DEBUG",
                LOG_FORMAT="json",
                LOG_DIR="/tmp/gw",
                LOG_FILE_ENABLED=True,
                LOG_CONSOLE_ENABLED=False,
            )
        )

        assert config.to_dict()["level"] == "DEBUG"
        assert config.file.enabled is True
        assert config.file.log_dir == "/tmp/gw"
        assert config.console.enabled is False

    def test_setup_writes_log_files(self, tmp_path, restore_root_logger):
        config = LoggingConfig(
            level="INFO",
            format="simple",
            file=FileHandlerConfig(enabled=True, log_dir=str(tmp_path)),
            console=ConsoleHandlerConfig(enabled=False),
        )

        setup_logging(config)
        logger = get_logger("shopify_gateway.tests.files")
        logger.info("admitted", shop="alpha.myshopify.com")
        logger.error("request failed", status=0)
        for handler in restore_root_logger.handlers:
            handler.flush()

        app_log = (tmp_path / "gateway.log").read_text()
        error_log = (tmp_path / "errors.log").read_text()
        assert "admitted | shop=alpha.myshopify.com" in app_log
        assert "request failed | status=0" in error_log
        assert "admitted" not in error_log
