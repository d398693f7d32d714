"""
Logging system for Transfer Client.

Example:
    >>> from transfer_client.core.logging import LoggingConfig, configure_logging
    >>>
    >>> logger = configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
    >>> logger.info("Transfer started", method="GET", url="https://api.example.com")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import TransferLogger, get_logger, configure_logging, ROOT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "TransferLogger",
    "get_logger",
    "configure_logging",
    "ROOT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
