"""Configuration management for the Logosmith gateway.

This module provides centralized configuration using Pydantic Settings.
All configuration is loaded from environment variables with the LOGOSMITH_
prefix, allowing deployment-specific values without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LOGOSMITH_* prefix)
2. .env file in the working directory
3. Default values defined in LogosmithConfig

Example .env file:
    LOGOSMITH_OPENAI_API_KEY=sk-...
    LOGOSMITH_ENVIRONMENT=production
    LOGOSMITH_SERVER_PORT=3001

Startup Contract
----------------
The provider credential is the only required setting.  It must be present
and start with ``sk-``; otherwise constructing :class:`LogosmithConfig`
raises :class:`pydantic.ValidationError` and :func:`logosmith.api.main.main`
exits before the server starts listening.

There is deliberately no module-level ``config`` instance.  The entry point
builds one configuration object and hands it to
:func:`logosmith.api.main.create_app`, which passes it on to the components
that need it.

Usage Example
-------------
    from logosmith.core.config import LogosmithConfig

    config = LogosmithConfig()
    print(config.cors_origins)
    print(config.variation_count)
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_KEY_PREFIX = "sk-"

DEFAULT_DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
]
DEFAULT_PROD_ORIGINS = ["https://chrisforti.github.io"]


class LogosmithConfig(BaseSettings):
    """Main configuration for the Logosmith gateway.

    Attributes
    ----------
    Provider Settings:
        openai_api_key : SecretStr
            OpenAI API key (required, must start with ``sk-``)
        image_model : str
            Image model identifier sent with every request
        image_size : str
            Output resolution requested from the provider
        image_quality : Literal["standard", "hd"]
            Quality tier requested from the provider
        request_timeout : float
            Timeout in seconds for a single provider call

    Fan-Out Settings:
        variation_count : int
            Number of concurrent provider calls per request (1-10)
        style_variants : list[str]
            Style selectors cycled across the calls by index

    Ingress Guards:
        dev_cors_origins / prod_cors_origins : list[str]
            CORS allow-lists for each deployment environment
        rate_limit : str
            Per-client limit in ``limits`` notation (e.g. ``10/minute``)
        rate_limit_enabled : bool
            Toggle for the rate limiter (tests switch it off)
        max_body_bytes : int
            Largest accepted request body, by Content-Length

    Server Settings:
        environment : Literal["development", "production"]
            Deployment environment; selects the active CORS origins
        server_host : str
            Bind address
        server_port : int
            Port (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            Root logging level (case-insensitive)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LOGOSMITH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    openai_api_key: SecretStr = Field(
        ...,
        description="OpenAI API key from https://platform.openai.com/api-keys",
    )
    image_model: str = Field(
        default="dall-e-3",
        description="Image generation model identifier",
    )
    image_size: str = Field(
        default="1024x1024",
        description="Output resolution for every variation",
    )
    image_quality: Literal["standard", "hd"] = Field(
        default="standard",
        description="Quality tier for every variation",
    )
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for a single provider call",
        gt=0,
    )

    # Fan-out settings
    variation_count: int = Field(
        default=4,
        description="Number of concurrent variations per request",
        ge=1,
        le=10,
    )
    style_variants: list[Literal["vivid", "natural"]] = Field(
        default_factory=lambda: ["vivid", "natural"],
        description="Style selectors alternated across variations by index",
        min_length=1,
    )

    # Ingress guards
    dev_cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_DEV_ORIGINS))
    prod_cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_PROD_ORIGINS))
    rate_limit: str = Field(
        default="10/minute",
        description="Requests allowed per client address on /api routes",
    )
    rate_limit_enabled: bool = Field(default=True)
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted request body in bytes",
        ge=1,
    )

    # Server settings
    environment: Literal["development", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3001,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    @field_validator("openai_api_key")
    @classmethod
    def _check_key_format(cls, value: SecretStr) -> SecretStr:
        secret = value.get_secret_value().strip()
        if not secret:
            raise ValueError("OpenAI API key must not be empty")
        if not secret.startswith(API_KEY_PREFIX):
            # The value itself is never echoed back.
            raise ValueError(f"Invalid OpenAI API key format. It should start with '{API_KEY_PREFIX}'")
        return SecretStr(secret)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Return the CORS allow-list for the active environment."""
        return self.prod_cors_origins if self.is_production else self.dev_cors_origins
