"""
Configuration-related exceptions
"""

from .base import ShopifyGatewayException
from typing import Optional


class ConfigurationError(ShopifyGatewayException):
    """Raised when there's a configuration error"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None,
        error_code: str = "CONFIG_ERROR",
    ):
        config_details = {"config_key": config_key}
        if details:
            config_details.update(details)
        super().__init__(
            message,
            error_code,
            config_details,
            cause,
        )


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration validation fails"""

    def __init__(
        self,
        message: str,
        validation_errors: list,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None,
    ):
        validation_details = {"validation_errors": validation_errors}
        if details:
            validation_details.update(details)
        super().__init__(
            message,
            details=validation_details,
            cause=cause,
            error_code="CONFIG_VALIDATION_ERROR",
        )
