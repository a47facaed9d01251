"""
Keysmith configuration management.

Loads configuration from environment variables or .env file.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseSettings):
    """
    Logging settings.

    Read from the same KEYSMITH_* variables as KeysmithConfig, but
    without the Supabase connection fields, so commands that never
    connect can still honour the log level and format.
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)",
    )

    log_format: str = Field(
        default="console",
        description="Log renderer: 'console' for development, 'json' for production",
    )

    # Debug
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in {"console", "json"}:
            raise ValueError("log_format must be 'console' or 'json'")
        return fmt


class KeysmithConfig(LoggingConfig):
    """
    Keysmith configuration settings.

    Can be loaded from:
    1. Environment variables (KEYSMITH_SUPABASE_URL, KEYSMITH_SUPABASE_KEY, etc.)
    2. .env file in project root
    3. Direct instantiation with kwargs

    Example:
        ```python
        # From environment
        config = KeysmithConfig()

        # Direct instantiation
        config = KeysmithConfig(
            supabase_url="https://xxx.supabase.co",
            supabase_key="your-key"
        )
        ```
    """

    # Supabase connection
    supabase_url: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)",
    )

    supabase_key: str = Field(
        ...,
        description="Supabase service role key (for admin operations)",
    )

    # Database schema
    db_schema: str = Field(
        default="public",
        description="PostgreSQL schema where keysmith tables live",
    )

    # JWT settings
    jwt_secret: Optional[str] = Field(
        default=None,
        description="JWT secret for token validation (usually from Supabase)",
    )

    # API keys
    key_prefix: str = Field(
        default="ks_",
        min_length=1,
        max_length=16,
        description="Prefix prepended to every issued API key",
    )

    # Feature flags
    enable_audit_log: bool = Field(
        default=True,
        description="Write audit entries for key and permission changes",
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Ensure Supabase URL is valid."""
        if not v.startswith("https://"):
            raise ValueError("supabase_url must start with https://")
        return v.rstrip("/")

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: str) -> str:
        """Ensure Supabase key is not empty."""
        if not v or len(v) < 10:
            raise ValueError("supabase_key appears invalid (too short)")
        return v


def load_config(**kwargs) -> KeysmithConfig:
    """
    Load Keysmith configuration.

    Priority order:
    1. Keyword arguments
    2. Environment variables (KEYSMITH_*)
    3. .env file

    Args:
        **kwargs: Override configuration values

    Returns:
        KeysmithConfig instance

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    return KeysmithConfig(**kwargs)
