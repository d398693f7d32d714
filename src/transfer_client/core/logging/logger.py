"""
Main logger for Transfer Client.

Wraps a stdlib logger: keyword fields become ``extra`` after credential
masking, and an optional LoggingConfig attaches console / rotating file
handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from .config import LoggingConfig, LogLevel
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter
from ...utils.sanitizer import mask_sensitive_data

ROOT_LOGGER_NAME = "transfer_client"


class TransferLogger:
    """
    Logger used by the client and the engine.

    Without a config the wrapped logger is left untouched: records propagate
    to whatever handlers the application installed (the package itself only
    installs a NullHandler). With a config, handlers are created from it and
    propagation is switched off.

    Example:
        >>> logger = TransferLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Transfer started", url="https://api.example.com", method="GET")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = ROOT_LOGGER_NAME):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if config is not None:
            self._configure(config)

    def _configure(self, config: LoggingConfig) -> None:
        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Reinitializing replaces old handlers
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        filters: List[logging.Filter] = []
        if config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        formatter = get_formatter(config.format.value)

        handlers: List[logging.Handler] = []
        if config.enable_console:
            handlers.append(logging.StreamHandler(sys.stderr))
        if config.enable_file and config.file_path:
            Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                config.file_path,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding='utf-8'
            ))

        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            for log_filter in filters:
                handler.addFilter(log_filter)
            self._logger.addHandler(handler)

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, exc_info=exc_info, extra=mask_sensitive_data(fields))

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, message, exc_info=True, **fields)

    def close(self) -> None:
        """
        Flush and close handlers created from the config.

        Idempotent. Does nothing for a logger created without a config.
        """
        if self._closed or self.config is None:
            self._closed = True
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                pass
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


_default_logger: Optional[TransferLogger] = None


def get_logger(name: str = ROOT_LOGGER_NAME) -> TransferLogger:
    """
    Unconfigured logger for ``name``.

    Returns the globally configured logger when ``name`` is the package root
    and configure_logging() was called.
    """
    if name == ROOT_LOGGER_NAME and _default_logger is not None:
        return _default_logger
    return TransferLogger(name=name)


def configure_logging(config: LoggingConfig) -> TransferLogger:
    """
    Configure the package root logger.

    Example:
        >>> configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
    """
    global _default_logger
    if _default_logger is not None:
        _default_logger.close()
    _default_logger = TransferLogger(config)
    return _default_logger
