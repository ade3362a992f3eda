"""
Application settings using Pydantic for validation and type safety.
Security: The API key is only ever loaded from the environment or ``.env``.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError

API_KEYS_URL = "https://vibeslides.app/api-keys"


class Settings(BaseSettings):
    """Client configuration with validation."""

    # API access
    api_key: Optional[str] = Field(
        default=None,
        description="Vibe Slides API key (sensitive)"
    )
    api_url: str = Field(
        default="https://api.vibeslides.app",
        description="Vibe Slides API base URL"
    )
    view_url_base: str = Field(
        default="https://vibeslides.app/d",
        description="Base URL of the public deck viewer"
    )

    # Polling
    poll_deck_interval: float = Field(
        default=5.0,
        gt=0,
        description="Deck poll interval in seconds"
    )
    poll_export_interval: float = Field(
        default=1.0,
        gt=0,
        description="Export poll interval in seconds"
    )
    timeout: float = Field(
        default=600.0,
        gt=0,
        description="Max wait per polling phase in seconds"
    )

    # HTTP
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single API request in seconds"
    )
    download_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Download connect and idle-read timeout in seconds"
    )
    max_redirects: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Maximum redirects followed while downloading"
    )

    @field_validator("api_url", "view_url_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended directly."""
        return v.rstrip("/")

    def require_api_key(self) -> str:
        """Return the API key or raise if it is missing."""
        if not self.api_key:
            raise ConfigurationError(
                "VIBE_API_KEY environment variable is required. "
                f"Get your API key from {API_KEYS_URL}"
            )
        return self.api_key

    def deck_url(self, deck_id: str) -> str:
        """Canonical viewer URL for a deck."""
        return f"{self.view_url_base}/{deck_id}"

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = "VIBE_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
