"""Configuration settings for the inFakt MCP server."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from infakt_mcp.errors import ConfigurationError

DEFAULT_API_URL = "https://api.infakt.pl/v3"
DEFAULT_DEBUG_LOG_PATH = Path.home() / ".infakt-mcp-debug.log"


class Settings(BaseSettings):
    """Flat settings read from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # inFakt API
    infakt_api_key: SecretStr = Field(..., validation_alias="INFAKT_API_KEY")
    infakt_api_url: str = Field(default=DEFAULT_API_URL, validation_alias="INFAKT_API_URL")
    infakt_timeout: float = Field(default=30.0, validation_alias="INFAKT_TIMEOUT")
    infakt_default_limit: int = Field(
        default=25, ge=1, validation_alias="INFAKT_DEFAULT_LIMIT"
    )

    # Invoice line items
    send_line_totals: bool = Field(
        default=True,
        validation_alias="INFAKT_SEND_LINE_TOTALS",
        description="Send computed net/tax/gross totals with each invoice line item",
    )

    # Diagnostics trace file
    debug_log: bool = Field(default=False, validation_alias="INFAKT_DEBUG_LOG")
    debug_log_path: Path = Field(
        default=DEFAULT_DEBUG_LOG_PATH, validation_alias="INFAKT_DEBUG_LOG_PATH"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="LOG_FORMAT"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_settings() -> Settings:
    """Get settings, turning validation failures into ConfigurationError."""
    try:
        settings = get_settings()
    except ValidationError as e:
        missing = [
            str(err["loc"][0])
            for err in e.errors()
            if err.get("loc") and err["type"] == "missing"
        ]
        if "INFAKT_API_KEY" in missing:
            raise ConfigurationError(
                "INFAKT_API_KEY environment variable is required"
            ) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if not settings.infakt_api_key.get_secret_value().strip():
        raise ConfigurationError("INFAKT_API_KEY environment variable is required")
    return settings
