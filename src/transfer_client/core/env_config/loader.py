"""
Configuration loader from environment variables and .env files.
"""

import os
from typing import Optional

from ..config import TransferClientConfig, TransferDefaults
from ..logging.config import LoggingConfig
from .settings import TransferClientSettings

PROFILE_ENV = "TRANSFER_CLIENT_ENV"


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    Get .env file path for profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV)

    if not profile:
        return ".env"

    return f".env.{profile}"


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides
) -> TransferClientConfig:
    """
    Load TransferClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (TransferClientSettings field names)
    2. Environment variables (TRANSFER_CLIENT_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Args:
        profile: Profile name, selects ``.env.<profile>``
        env_file: Custom .env file path (overrides profile)
        **overrides: Explicit settings overrides

    Raises:
        pydantic.ValidationError: Invalid value in environment or overrides

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(profile="production", timeout=10)
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    settings = TransferClientSettings(_env_file=env_file, **overrides)

    logging_config = None
    logging_settings = settings.to_logging_settings()
    if logging_settings:
        logging_config = LoggingConfig.create(
            level=logging_settings.level,
            format=logging_settings.format,
            enable_console=logging_settings.enable_console,
            enable_file=logging_settings.enable_file,
            file_path=logging_settings.file_path,
            max_bytes=logging_settings.max_bytes,
            backup_count=logging_settings.backup_count,
            enable_correlation_id=logging_settings.enable_correlation_id,
        )

    return TransferClientConfig(
        base_url=settings.base_url or None,
        defaults=TransferDefaults(
            timeout=settings.timeout,
            fail_on_error=settings.fail_on_error,
            follow_location=settings.follow_location,
        ),
        restricted_mode=settings.restricted_mode,
        user_agent=settings.user_agent,
        headers=tuple(settings.headers),
        logging=logging_config,
    )
