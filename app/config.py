"""Configuration management - loads environment variables into typed settings."""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extension_relay.core.config import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT_PREFIX,
    DEFAULT_TRANSCRIBE_URL,
    RelayConfig,
    default_upstream_url,
)

_TRUTHY = ("1", "true", "yes")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Host for the relay to listen on")
    port: int = Field(default=3000, description="Port for the relay to listen on")

    # Upstream Credential
    hf_api_key: str | None = Field(
        default=None,
        description="Bearer credential for the inference API. Required for /api/ask and /api/transcribe",
    )

    # CORS Configuration
    extension_id: str = Field(
        default="",
        description="Browser extension id; allows the origin chrome-extension://<EXTENSION_ID>",
    )
    allowed_origins: str = Field(
        default="",
        description="Additional allowed CORS origins (comma-separated list)",
    )
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
        description="Deployment mode. Outside 'production' unknown origins get a wildcard CORS header",
    )
    cors_allow_all: str = Field(
        default="0",
        description="Send a wildcard CORS header to unknown origins even in production (1 = enabled)",
    )

    # Upstream API Configuration
    upstream_api_style: Literal["inference", "chat"] = Field(
        default="inference",
        description="Upstream request shape: 'inference' ({model, inputs}) or 'chat' (chat completion)",
    )
    upstream_url: str | None = Field(
        default=None,
        description="Question endpoint (optional; defaults to the stock URL of UPSTREAM_API_STYLE)",
    )
    transcribe_url: str | None = Field(
        default=None,
        description="Speech-to-text endpoint (optional; defaults to the hosted whisper-large-v3 model)",
    )
    default_model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used when the extension does not send one",
    )
    max_tokens: int = Field(default=512, description="max_tokens for chat-style requests")
    temperature: float = Field(default=0.2, description="temperature for chat-style requests")
    default_prompt_prefix: str = Field(
        default=DEFAULT_PROMPT_PREFIX,
        description="Instruction prepended to the question when no promptTemplate is sent",
    )

    # Timeout Configuration (unset = wait for the upstream indefinitely)
    upstream_timeout_s: float | None = Field(
        default=None,
        description="Optional total timeout for upstream requests (seconds)",
    )
    upstream_connect_timeout_s: float | None = Field(
        default=None,
        description="Optional connection timeout for upstream requests (seconds)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_request_bodies: str = Field(
        default="0",
        description="Log request bodies at DEBUG (1 = enabled, 0 = disabled). WARNING: Only enable in development",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v

    @field_validator("hf_api_key")
    @classmethod
    def validate_api_key(cls, v: str | None) -> str | None:
        """Treat an empty or blank credential as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("upstream_url", "transcribe_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate URL format if provided."""
        if v is None or v == "":
            return None
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"URL must use http or https scheme, got {v}")
        if not parsed.netloc:
            raise ValueError(f"URL must have a valid host, got {v}")
        return v

    @field_validator("upstream_timeout_s", "upstream_connect_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Validate timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_tokens must be positive, got {v}")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not (0.0 <= v <= 2.0):
            raise ValueError(f"temperature must be between 0 and 2, got {v}")
        return v

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() or "development"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v.upper()

    @field_validator("cors_allow_all", "log_request_bodies")
    @classmethod
    def validate_boolean_string(cls, v: str) -> str:
        """Validate boolean string format."""
        v_lower = v.lower().strip()
        if v_lower not in ("0", "1", "true", "false", "yes", "no"):
            raise ValueError(f"Boolean field must be '0', '1', 'true', 'false', 'yes', or 'no', got {v}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def extension_origin(self) -> str | None:
        """The chrome-extension:// origin derived from EXTENSION_ID, if any."""
        extension_id = self.extension_id.strip()
        if not extension_id:
            return None
        return f"chrome-extension://{extension_id}"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if not self.allowed_origins:
            return []
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def allowed_origin_set(self) -> frozenset[str]:
        """Every origin that gets its own Origin echoed back."""
        origins = set(self.allowed_origins_list)
        if self.extension_origin:
            origins.add(self.extension_origin)
        return frozenset(origins)

    @property
    def cors_allow_all_bool(self) -> bool:
        """Convert cors_allow_all string to boolean."""
        return self.cors_allow_all.lower().strip() in _TRUTHY

    @property
    def cors_wildcard_fallback(self) -> bool:
        """Whether origins outside the allowed set still receive ``*``."""
        return not self.is_production or self.cors_allow_all_bool

    @property
    def log_request_bodies_bool(self) -> bool:
        """Convert log_request_bodies string to boolean."""
        return self.log_request_bodies.lower().strip() in _TRUTHY

    @property
    def effective_upstream_url(self) -> str:
        """Get the question endpoint, falling back to the stock URL for the API style."""
        return self.upstream_url or default_upstream_url(self.upstream_api_style)

    def to_relay_config(self) -> RelayConfig:
        """Freeze the upstream-facing part of the settings for the core library."""
        return RelayConfig(
            api_key=self.hf_api_key,
            api_style=self.upstream_api_style,
            upstream_url=self.effective_upstream_url,
            transcribe_url=self.transcribe_url or DEFAULT_TRANSCRIBE_URL,
            default_model=self.default_model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            default_prompt_prefix=self.default_prompt_prefix,
            timeout_s=self.upstream_timeout_s,
            connect_timeout_s=self.upstream_connect_timeout_s,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are loaded from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Raises:
        ValueError: If settings are invalid.

    Returns:
        Settings: The validated settings instance.
    """
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load configuration: {e}\n"
            "Please check your environment and .env file for invalid values."
        ) from e
