"""Core Transfer Client модули."""

from .config import TransferDefaults, TransferClientConfig, restricted_mode_from_env
from .exceptions import (
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
    classify_engine_exception,
)
from .options import Option, AuthType, OptionSet, resolve_option, resolve_auth_type
from .result import TransferResult
from .engine import TransferEngine, TransferSession, RequestsTransferEngine, RequestsTransferSession
from .client import TransferClient, HttpMethod

__all__ = [
    # Config
    "TransferDefaults",
    "TransferClientConfig",
    "restricted_mode_from_env",
    # Exceptions
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
    "classify_engine_exception",
    # Options
    "Option",
    "AuthType",
    "OptionSet",
    "resolve_option",
    "resolve_auth_type",
    # Client
    "TransferResult",
    "TransferEngine",
    "TransferSession",
    "RequestsTransferEngine",
    "RequestsTransferSession",
    "TransferClient",
    "HttpMethod",
]
