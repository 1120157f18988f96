"""
Main logging module for the Shopify gateway
"""

import logging
from typing import Any, Dict, Optional

from .config import LoggingConfig, FileHandlerConfig, ConsoleHandlerConfig
from .handlers import FileHandler, ConsoleHandler

# Global logger cache
_loggers: Dict[str, logging.Logger] = {}


class StructuredLogger:
    """Wrapper around standard Python logger that supports structured logging with keyword arguments"""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with structured data as key=value pairs"""
        if not kwargs:
            return message

        structured_parts = []
        for key, value in kwargs.items():
            if value is not None:
                if isinstance(value, (dict, list)):
                    structured_parts.append(f"{key}={str(value)}")
                elif isinstance(value, str) and " " in value:
                    # Quote strings with spaces
                    structured_parts.append(f'{key}="{value}"')
                else:
                    structured_parts.append(f"{key}={value}")

        if structured_parts:
            return f"{message} | {' | '.join(structured_parts)}"
        return message

    def _extra(self, message: str, kwargs) -> Dict[str, Any]:
        """Record attributes read by the JSON and structured formatters"""
        return {
            "event": message,
            "extra_fields": {key: value for key, value in kwargs.items() if value is not None},
        }

    def _log(self, level: int, message: str, kwargs, exc_info: bool = False):
        self._logger.log(
            level,
            self._format_message(message, **kwargs),
            exc_info=exc_info,
            stacklevel=3,
            extra=self._extra(message, kwargs),
        )

    def debug(self, message: str, **kwargs):
        """Log debug message with structured data"""
        if self._logger.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with structured data"""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with structured data"""
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception message with structured data"""
        self._log(logging.ERROR, message, kwargs, exc_info=True)


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Setup logging configuration for the application"""
    if config is None:
        config = LoggingConfig()

    # Clear existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, config.level.upper()))

    if config.file.enabled:
        if config.file.app_log_enabled:
            root_logger.addHandler(
                FileHandler.create_app_handler(
                    log_dir=config.file.log_dir,
                    max_bytes=config.file.max_file_size,
                    backup_count=config.file.backup_count,
                    level=getattr(logging, config.level.upper()),
                    formatter_type=config.format,
                )
            )

        if config.file.error_log_enabled:
            root_logger.addHandler(
                FileHandler.create_error_handler(
                    log_dir=config.file.log_dir,
                    max_bytes=config.file.max_file_size,
                    backup_count=config.file.backup_count,
                    formatter_type=config.format,
                )
            )

    if config.console.enabled:
        root_logger.addHandler(
            ConsoleHandler.create_handler(
                level=getattr(logging, config.console.level.upper()),
                formatter_type=config.format,
            )
        )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.info("Logging system initialized")


def logging_config_from_settings(logging_settings) -> LoggingConfig:
    """Build a LoggingConfig from LoggingSettings"""
    return LoggingConfig(
        level=logging_settings.LOG_LEVEL,
        format=logging_settings.LOG_FORMAT,
        file=FileHandlerConfig(
            enabled=logging_settings.LOG_FILE_ENABLED,
            log_dir=logging_settings.LOG_DIR,
        ),
        console=ConsoleHandlerConfig(
            enabled=logging_settings.LOG_CONSOLE_ENABLED,
            level=logging_settings.LOG_LEVEL,
        ),
    )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance"""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return StructuredLogger(_loggers[name])
