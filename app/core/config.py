# app/core/config.py
"""Configuration settings for the AI Chat backend.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="AI Chat API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    db_pool_size: int = Field(default=20, description="Database connection pool size")
    db_max_overflow: int = Field(default=0, description="Database max overflow connections")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== Authentication (Clerk) =====
    clerk_jwt_key: str | None = Field(
        default=None, description="Clerk PEM public key for networkless token verification"
    )
    clerk_jwks_url: str | None = Field(default=None, description="Clerk JWKS URL")
    clerk_authorized_parties: str = Field(
        default="", description="Accepted 'azp' claims (comma-separated, empty accepts any)"
    )

    # ===== Image uploads (ImageKit) =====
    imagekit_url_endpoint: str | None = Field(default=None, description="ImageKit URL endpoint")
    imagekit_public_key: str | None = Field(default=None, description="ImageKit public key")
    imagekit_private_key: str | None = Field(default=None, description="ImageKit private key")
    upload_token_ttl_seconds: int = Field(
        default=1800, description="Lifetime of signed upload credentials in seconds"
    )

    # ===== Conversations =====
    conversation_title_max_length: int = Field(
        default=40, description="Length a conversation title is cut to"
    )
    append_max_retries: int = Field(
        default=3, description="Attempts for an append that collides on turn position"
    )

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def clerk_authorized_parties_list(self) -> list[str]:
        return [
            party.strip() for party in self.clerk_authorized_parties.split(",") if party.strip()
        ]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=3000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_upload_enabled(self) -> bool:
        return bool(
            self.imagekit_url_endpoint and self.imagekit_public_key and self.imagekit_private_key
        )

    @property
    def has_token_verification_key(self) -> bool:
        return bool(self.clerk_jwt_key or self.clerk_jwks_url)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("conversation_title_max_length")
    @classmethod
    def validate_title_length(cls, v):
        if v < 1 or v > 40:
            raise ValueError("Conversation title length must be between 1 and 40")
        return v

    @field_validator("append_max_retries")
    @classmethod
    def validate_append_retries(cls, v):
        if v < 1:
            raise ValueError("At least one append attempt is required")
        return v

    @model_validator(mode="after")
    def set_computed_fields(self):
        if self.clerk_jwt_key:
            # Keys pasted into .env files usually carry literal "\n" sequences
            self.clerk_jwt_key = self.clerk_jwt_key.replace("\\n", "\n")
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if not settings.has_token_verification_key:
            errors.append("CLERK_JWT_KEY or CLERK_JWKS_URL is required")
        if settings.is_production and not settings.has_upload_enabled:
            errors.append("IMAGEKIT_* settings are required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "upload_enabled": settings.has_upload_enabled,
            "token_verification": settings.has_token_verification_key,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "auth_configured": settings.has_token_verification_key,
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
