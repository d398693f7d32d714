"""
Environment configuration for Transfer Client.

Example:
    >>> from transfer_client.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(profile="production", base_url="https://custom.api.com")
"""

from .loader import load_from_env, get_env_file_path, PROFILE_ENV
from .settings import TransferClientSettings, LoggingSettings

__all__ = [
    "load_from_env",
    "get_env_file_path",
    "PROFILE_ENV",
    "TransferClientSettings",
    "LoggingSettings",
]
