# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Group related settings together; each group becomes a section future PRs extend.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parents[4]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "underwriting-demo"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["http://localhost:3000"]

    # -- Codat --
    CODAT_BASE_URL: str = "https://api.codat.io"
    CODAT_API_KEY: str = Field(
        default="",
        description="Codat API key; sent base64-encoded as a Basic authorization header.",
    )
    CODAT_TIMEOUT: float = Field(
        default=30.0,
        description="Per-request timeout in seconds for Codat API calls.",
    )
    CODAT_PLATFORM_PAGE_SIZE: int = Field(
        default=100,
        description="Page size used when listing accounting platforms.",
    )

    # -- Underwriting thresholds --
    UNDERWRITING_MIN_GROSS_PROFIT_MARGIN: float = Field(
        default=0.4,
        description="Minimum (revenue - cost of sales) / revenue over the last twelve months.",
    )
    UNDERWRITING_MAX_REPAYMENT_TO_REVENUE: float = Field(
        default=0.3,
        description="Maximum monthly repayment as a share of average monthly revenue.",
    )
    UNDERWRITING_MAX_GEARING_RATIO: float = Field(
        default=0.5,
        description="Maximum liabilities / equity at the latest balance sheet date.",
    )


settings = Settings()
