"""Configuration management for workbook extraction.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
WBX_ prefix, or via a .env file in the project root.

Environment Variables:
    WBX_MAX_FILE_SIZE_MB: Maximum workbook upload size in MB (default: 10)
    WBX_DEFAULT_HEADER_ROW: Header row used when a request omits it (default: 0)
    WBX_DEFAULT_INCLUDE_EMPTY_CELLS: Empty-cell policy when a request omits it
        (default: false)
    WBX_LOG_LEVEL: Logging level (default: INFO)
    WBX_DEBUG: Enable debug mode (default: false)
    WBX_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    WBX_SERVER_HOST: Server bind host (default: 0.0.0.0)
    WBX_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        WBX_LOG_LEVEL=DEBUG
        WBX_MAX_FILE_SIZE_MB=50
    """

    model_config = SettingsConfigDict(
        env_prefix="WBX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Upload Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum workbook upload size in megabytes."""

    # =========================================================================
    # Read Defaults
    # =========================================================================

    default_header_row: int = 0
    """Zero-based header row used when a request does not name one."""

    default_include_empty_cells: bool = False
    """Whether empty cells appear in rows when a request does not say."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("default_header_row")
    @classmethod
    def validate_default_header_row(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"default_header_row must be at least 0, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for diagnostics."""
        return {
            "max_file_size_mb": self.max_file_size_mb,
            "default_header_row": self.default_header_row,
            "default_include_empty_cells": self.default_include_empty_cells,
            "log_level": self.log_level,
            "debug": self.debug,
            "cors_origins": self.cors_origins,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Validate settings on application startup.

    Emits warnings for settings that are acceptable for development but
    questionable in production, then logs a configuration summary.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"max_file_size_mb={s.max_file_size_mb}, "
        f"default_header_row={s.default_header_row}, "
        f"default_include_empty_cells={s.default_include_empty_cells}"
    )


# Create the global settings instance
settings = Settings()
