"""
Centralized configuration for the document issuance service.

Pydantic v2 settings management. Every value has a documented default so
the service starts against the demo gateway out of the box; values that
are present but malformed (an empty API key, a non-HTTP base URL) fail
fast at startup and never surface mid-issuance.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://api.gov24.example.com"
DEFAULT_API_KEY = "demo-key"


class Settings(BaseSettings):
    """
    Application settings parsed from ``GOV24_*`` environment variables.
    """

    # ---------------------------------------------------------------------
    # Remote issuance gateway
    # ---------------------------------------------------------------------

    base_url: Annotated[
        AnyHttpUrl,
        Field(
            default=DEFAULT_BASE_URL,
            description="Base URL of the document issuance gateway",
        ),
    ]

    api_key: Annotated[
        SecretStr,
        Field(
            default=SecretStr(DEFAULT_API_KEY),
            description=(
                "Service authentication key. Sent as the x-api-key header "
                "and, for GET documents, as the serviceKey query parameter."
            ),
        ),
    ]

    request_timeout_seconds: Annotated[
        float,
        Field(
            default=30.0,
            gt=0,
            description="Per-request timeout for issuance calls",
        ),
    ]

    # ---------------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------------

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GOV24_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("api_key")
    @classmethod
    def api_key_not_blank(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("GOV24_API_KEY is set but empty.")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @property
    def api_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return str(self.base_url).rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings provider.

    Parsed once per process; later environment changes are not observed.
    """
    return Settings()
