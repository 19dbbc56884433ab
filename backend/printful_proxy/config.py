"""
Printful Proxy - Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again in the app lifespan.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults except the Printful API key,
    which must be provided for any upstream call to succeed.
    """

    # ── Printful ──────────────────────────────────────────────────────────
    # Private token from https://developers.printful.com (Bearer auth)
    printful_api_key: str = Field(
        default="",
        description="Printful private token used as a Bearer credential",
    )

    printful_base_url: str = Field(default="https://api.printful.com")

    # Sent as X-PF-Store-Id; only needed for account-level tokens
    printful_store_id: Optional[str] = Field(default=None)

    # Seconds for connect + read on each upstream request
    printful_timeout: float = Field(default=30.0, gt=0, le=300)

    # ── Retry Configuration ───────────────────────────────────────────────
    # Tenacity settings for idempotent (GET) Printful calls only.
    # POST/DELETE are never retried: a replayed order creation ships twice.
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: float = Field(default=1.0, ge=0, le=30)
    retry_max_wait: float = Field(default=10.0, ge=0, le=120)

    # ── Quick Product Creation ────────────────────────────────────────────
    # Catalog products like t-shirts have hundreds of size/color variants;
    # quick create syncs only the first N of them.
    quick_create_max_variants: int = Field(default=10, ge=1, le=100)

    # Retail price = catalog variant price * markup
    default_retail_markup: float = Field(default=1.5, gt=0, le=20)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of frontend origins
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("printful_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths start with '/', so the base URL must not end with one."""
        return v.rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PRINTFUL_API_KEY and printful_api_key both work
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.printful_api_key or self.printful_api_key == "your_printful_api_key_here":
            errors.append(
                "PRINTFUL_API_KEY is not set. "
                "Create a private token at https://developers.printful.com/tokens"
            )
        if self.retry_min_wait > self.retry_max_wait:
            errors.append("RETRY_MIN_WAIT must not exceed RETRY_MAX_WAIT")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
