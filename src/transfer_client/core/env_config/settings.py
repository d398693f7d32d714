"""
Pydantic settings for environment configuration.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseModel):
    """Logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)


class TransferClientSettings(BaseSettings):
    """
    Transfer Client configuration from environment variables.

    Reads from:
    1. Init kwargs (load_from_env overrides)
    2. Environment variables (TRANSFER_CLIENT_*)
    3. .env file
    4. Defaults

    Example .env file:
        TRANSFER_CLIENT_BASE_URL=https://api.example.com
        TRANSFER_CLIENT_TIMEOUT=10
        TRANSFER_CLIENT_RESTRICTED_MODE=true
        TRANSFER_CLIENT_HEADERS=["Accept: application/json"]
        TRANSFER_CLIENT_LOG_LEVEL=DEBUG
        TRANSFER_CLIENT_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='TRANSFER_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Request defaults
    base_url: str = Field(default="", description="Base URL for relative endpoints")
    timeout: float = Field(default=30.0, gt=0, description="Default TIMEOUT in seconds")
    fail_on_error: bool = Field(default=True)
    follow_location: bool = Field(default=True)
    restricted_mode: bool = Field(default=False, description="Never enable FOLLOWLOCATION by default")
    user_agent: Optional[str] = None
    headers: List[str] = Field(default_factory=list, description="Header lines sent with every request")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = Field(default=None, validate_default=True)
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """file_path is required when log_enable_file=True."""
        if info.data.get('log_enable_file') and not v:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return v

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_correlation_id=self.log_enable_correlation_id,
        )
