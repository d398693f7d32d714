"""Transfer Client - fluent wrapper over requests / ftplib / paramiko transfers."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.client import TransferClient, HttpMethod
from .core.config import TransferClientConfig, TransferDefaults
from .core.env_config import load_from_env
from .core.engine import TransferEngine, TransferSession, RequestsTransferEngine
from .core.options import Option, AuthType
from .core.result import TransferResult
from .core.logging import LoggingConfig, configure_logging
from .core.exceptions import (
    ErrorCode,
    TransferClientException,
    ConfigurationError,
    EngineUnavailableError,
    UnknownOptionError,
    TransferError,
    TimeoutError,
    ConnectionError,
    DNSError,
    ProxyError,
    SSLError,
    RedirectError,
    ProtocolError,
    HTTPStatusError,
    FTPError,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('transfer_client')
logging.getLogger('transfer_client').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("transfer-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    "TransferClient",
    "HttpMethod",
    "TransferClientConfig",
    "TransferDefaults",
    "load_from_env",
    "TransferEngine",
    "TransferSession",
    "RequestsTransferEngine",
    "Option",
    "AuthType",
    "TransferResult",
    "LoggingConfig",
    "configure_logging",
    "ErrorCode",
    "TransferClientException",
    "ConfigurationError",
    "EngineUnavailableError",
    "UnknownOptionError",
    "TransferError",
    "TimeoutError",
    "ConnectionError",
    "DNSError",
    "ProxyError",
    "SSLError",
    "RedirectError",
    "ProtocolError",
    "HTTPStatusError",
    "FTPError",
]
