"""
Configuration module for the zkcash swap proxy backend.

This module uses Pydantic Settings to load and validate environment variables
for the listener, the upstream Jupiter and Solana RPC endpoints, CORS and the
inbound request pipeline (rate limiting, payload ceiling).

Environment variables are loaded from .env file or system environment.
The Settings instance is built once at startup and handed to the application
factory; handlers read it from app state rather than importing a singleton.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    PORT, RPC_URL, SLIPPAGE_BPS and CORS_ORIGINS keep the names used by the
    existing deployment .env files.
    """

    # =========================================================================
    # Server Configuration
    # =========================================================================

    SERVICE_NAME: str = Field(
        default="zkcash-backend",
        description="Service name reported by the health endpoint",
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the HTTP listener",
    )

    PORT: int = Field(
        default=3000,
        description="Port to bind the HTTP listener",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Upstream Configuration
    # =========================================================================

    RPC_URL: str = Field(
        default="https://api.mainnet-beta.solana.com",
        description="Solana JSON-RPC endpoint used for transaction status lookups",
        min_length=1,
    )

    JUPITER_QUOTE_API_URL: str = Field(
        default="https://quote-api.jup.ag/v6",
        description="Base URL of the Jupiter quote/swap API",
    )

    JUPITER_TOKEN_LIST_URL: str = Field(
        default="https://token.jup.ag/all",
        description="Full Jupiter token catalog URL",
    )

    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        description="Read timeout applied to every upstream call",
        gt=0,
        le=120,
    )

    # =========================================================================
    # Swap Defaults
    # =========================================================================

    SLIPPAGE_BPS: int = Field(
        default=50,
        description="Default slippage tolerance in basis points",
        ge=0,
        le=10000,
    )

    # =========================================================================
    # Inbound Pipeline Configuration
    # =========================================================================

    CORS_ORIGINS: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (empty allows only non-browser callers)",
    )

    TRUSTED_PROXY_HOPS: int = Field(
        default=1,
        description="Number of reverse proxies in front of the service whose X-Forwarded-For entries are trusted",
        ge=0,
    )

    RATE_LIMIT_REQUESTS: int = Field(
        default=160,
        description="Requests allowed per caller within one rate limit window",
        ge=1,
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=10,
        description="Length of the sliding rate limit window in seconds",
        ge=1,
    )

    MAX_BODY_BYTES: int = Field(
        default=512 * 1024,
        description="Largest request body accepted before parsing",
        ge=1,
    )

    # =========================================================================
    # Pydantic Settings Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse and return CORS_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        if not self.CORS_ORIGINS:
            return []

        return [
            origin.strip()
            for origin in self.CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def rate_limit(self) -> str:
        """Rate limit expressed in the limits-string notation used by slowapi."""
        return f"{self.RATE_LIMIT_REQUESTS}/{self.RATE_LIMIT_WINDOW_SECONDS} seconds"

    @property
    def jupiter_quote_api_str(self) -> str:
        """Jupiter API base URL without trailing slash."""
        return self.JUPITER_QUOTE_API_URL.rstrip("/")

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate LOG_LEVEL is a standard logging level name.

        Raises:
            ValueError: If the level is unknown
        """
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.strip().upper()

        if level not in allowed_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {allowed_levels}, got: {v}"
            )

        return level

    @field_validator("RPC_URL", "JUPITER_QUOTE_API_URL", "JUPITER_TOKEN_LIST_URL")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Expected an http(s) URL, got: '{v}'")
        return v


# =============================================================================
# Settings Factory
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create the process-wide Settings instance.

    Only the process entry point calls this; everything else receives the
    instance through the application factory.

    Raises:
        ValidationError: If environment variables are invalid.
    """
    return Settings()
