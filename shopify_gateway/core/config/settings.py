"""
Application settings and configuration management
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopify_gateway.shared.constants.shopify import (
    DEFAULT_API_VERSION,
    DEFAULT_MAX_REST_QUERIES_PER_SECOND,
    DEFAULT_MAX_CONCURRENT_GRAPHQL_QUERIES,
    DEFAULT_MAX_GRAPHQL_COST_PER_REQUEST,
    DEFAULT_TELEMETRY_WINDOW_SIZE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_EMPTY_PAGE_RETRIES,
    REST_WINDOW_SECONDS,
    REST_COOLDOWN_SECONDS,
    THROTTLE_RETRY_DELAY_SECONDS,
)
from shopify_gateway.core.exceptions import ConfigurationValidationError

_ENV_FILES = [".env.local", ".env"]  # Try .env.local first, then .env


class ShopifySettings(BaseSettings):
    """Shopify API and rate limiting settings"""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    SHOPIFY_API_VERSION: str = Field(default=DEFAULT_API_VERSION)
    # Only needed for app_url
    SHOPIFY_API_KEY: str = Field(default="")

    # REST fixed window
    MAX_REST_QUERIES_PER_SECOND: int = Field(
        default=DEFAULT_MAX_REST_QUERIES_PER_SECOND
    )
    REST_WINDOW_SECONDS: float = Field(default=REST_WINDOW_SECONDS)
    REST_COOLDOWN_SECONDS: float = Field(default=REST_COOLDOWN_SECONDS)

    # GraphQL cost bucket
    MAX_CONCURRENT_GRAPHQL_QUERIES: int = Field(
        default=DEFAULT_MAX_CONCURRENT_GRAPHQL_QUERIES
    )
    MAX_GRAPHQL_COST_PER_REQUEST: float = Field(
        default=DEFAULT_MAX_GRAPHQL_COST_PER_REQUEST
    )

    # Throttle recovery and pagination
    THROTTLE_RETRY_DELAY: float = Field(default=THROTTLE_RETRY_DELAY_SECONDS)
    PAGE_SIZE: int = Field(default=DEFAULT_PAGE_SIZE)
    PAGINATION_EMPTY_PAGE_RETRIES: int = Field(default=DEFAULT_EMPTY_PAGE_RETRIES)

    TELEMETRY_WINDOW_SIZE: int = Field(default=DEFAULT_TELEMETRY_WINDOW_SIZE)

    # HTTP client
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0)
    HTTP_CONNECT_TIMEOUT_SECONDS: float = Field(default=10.0)
    USER_AGENT: str = Field(default="ShopifyGateway/1.0")

    @field_validator("SHOPIFY_API_VERSION")
    @classmethod
    def validate_api_version(cls, v):
        if not v:
            return DEFAULT_API_VERSION
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings"""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")
    LOG_DIR: str = Field(default="logs")
    LOG_CONSOLE_ENABLED: bool = Field(default=True)
    LOG_FILE_ENABLED: bool = Field(default=False)


class Settings(BaseSettings):
    """Main application settings"""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Sub-settings
    shopify: ShopifySettings = ShopifySettings()
    logging: LoggingSettings = LoggingSettings()

    def validate_configuration(self) -> None:
        """Validate the complete configuration"""
        errors = []
        shopify = self.shopify

        for key in (
            "MAX_REST_QUERIES_PER_SECOND",
            "MAX_CONCURRENT_GRAPHQL_QUERIES",
            "TELEMETRY_WINDOW_SIZE",
            "PAGE_SIZE",
        ):
            if getattr(shopify, key) < 1:
                errors.append(f"{key} must be at least 1")

        for key in (
            "MAX_GRAPHQL_COST_PER_REQUEST",
            "REST_WINDOW_SECONDS",
            "REST_COOLDOWN_SECONDS",
            "THROTTLE_RETRY_DELAY",
        ):
            if getattr(shopify, key) < 0:
                errors.append(f"{key} must not be negative")

        if shopify.PAGINATION_EMPTY_PAGE_RETRIES < 0:
            errors.append("PAGINATION_EMPTY_PAGE_RETRIES must not be negative")

        if errors:
            raise ConfigurationValidationError(
                f"Configuration validation failed: {'; '.join(errors)}", errors
            )


def build_settings(shopify: Optional[ShopifySettings] = None, **overrides) -> Settings:
    """Build and validate a Settings instance, optionally overriding Shopify values"""
    shopify = shopify or ShopifySettings()
    if overrides:
        shopify = shopify.model_copy(update=overrides)
    built = Settings(shopify=shopify)
    built.validate_configuration()
    return built


# Create settings instance
settings = Settings()

# Validate configuration on import
settings.validate_configuration()
