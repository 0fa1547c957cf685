"""Configuration management for the BIRDS NEST reporting service."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_API_URL = "https://birdsnest.nist.gov/api/lcia/"
DEFAULT_REFRESH_URL = "https://birdsnest.nist.gov/api/token/refresh/"


class Settings(BaseSettings):
    """Application settings."""

    # Service endpoints and credentials
    api_url: str = Field(default=DEFAULT_API_URL, description="LCIA calculation endpoint")
    api_refresh_url: str = Field(default=DEFAULT_REFRESH_URL, description="Token refresh endpoint")
    api_key: str = Field(default="", description="Bearer access token")
    refresh_token: str = Field(default="", description="Refresh token used to obtain new access tokens")

    # Client behaviour
    poll_interval: float = Field(default=5.0, ge=0, description="Seconds between polls and between refresh retries")
    max_refresh_attempts: int = Field(default=5, ge=1, description="Refreshes allowed per submit or poll")
    read_timeout: float = Field(default=600.0, gt=0, description="Per-request read timeout in seconds")
    verify_tls: bool = Field(default=False, description="Verify the service's TLS certificate")
    poll_deadline: Optional[float] = Field(
        default=None, gt=0, description="Upper bound in seconds on one poll loop; unset means unbounded"
    )

    # Output
    output_dir: Path = Field(default=Path("."), description="Directory for JSON exchanges and reports")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")

    class Config:
        """Pydantic configuration."""

        env_prefix = "BIRDS_NEST_"
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings.

    Returns:
        Settings instance, read once from the environment and ``.env``
    """
    return Settings()
