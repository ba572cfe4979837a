"""
Unit tests for Configuration module.

This module contains unit tests for the configuration settings, validators,
computed properties and the configuration summary helpers.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import (
    ConfigValidator,
    EnvironmentEnum,
    LogFormatEnum,
    LogLevelEnum,
    Settings,
    get_config_summary,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove variables that would override defaults."""
    for name in [
        "ENVIRONMENT",
        "CLERK_JWT_KEY",
        "CLERK_JWKS_URL",
        "CLERK_AUTHORIZED_PARTIES",
        "IMAGEKIT_URL_ENDPOINT",
        "IMAGEKIT_PUBLIC_KEY",
        "IMAGEKIT_PRIVATE_KEY",
        "ALLOWED_ORIGINS",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self, clean_env):
        """Test default configuration values."""
        test_settings = Settings(_env_file=None)

        assert test_settings.app_name == "AI Chat API"
        assert test_settings.environment == EnvironmentEnum.development
        assert test_settings.debug is False
        assert test_settings.conversation_title_max_length == 40
        assert test_settings.append_max_retries == 3
        assert test_settings.upload_token_ttl_seconds == 1800
        assert test_settings.port == 3000
        assert test_settings.db_pool_size == 20
        assert not hasattr(test_settings, "clerk_secret_key")
        assert test_settings.log_level == LogLevelEnum.INFO
        assert test_settings.log_format == LogFormatEnum.simple

    def test_environment_validation(self, clean_env):
        """Test environment validation with various inputs."""
        assert Settings(_env_file=None, environment="production").environment == EnvironmentEnum.production
        assert Settings(_env_file=None, environment="DEVELOPMENT").environment == EnvironmentEnum.development
        assert Settings(_env_file=None, environment="dev").environment == EnvironmentEnum.development
        assert Settings(_env_file=None, environment="prod").environment == EnvironmentEnum.production

    def test_invalid_environment(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="moon")

    def test_computed_properties(self, clean_env):
        """Test environment computed properties."""
        dev_settings = Settings(_env_file=None, environment="development")
        assert dev_settings.is_development is True
        assert dev_settings.is_production is False

        prod_settings = Settings(_env_file=None, environment="production")
        assert prod_settings.is_production is True
        assert prod_settings.is_development is False

        test_settings = Settings(_env_file=None, environment="testing")
        assert test_settings.is_testing is True

    def test_allowed_origins_list(self, clean_env):
        """Test parsing of comma-separated CORS origins."""
        test_settings = Settings(_env_file=None, allowed_origins="https://chat.example.com, http://localhost:5173,")

        assert test_settings.allowed_origins_list == ["https://chat.example.com", "http://localhost:5173"]

    def test_clerk_authorized_parties_list(self, clean_env):
        assert Settings(_env_file=None).clerk_authorized_parties_list == []
        test_settings = Settings(_env_file=None, clerk_authorized_parties="https://a.example, https://b.example")
        assert test_settings.clerk_authorized_parties_list == ["https://a.example", "https://b.example"]

    def test_has_upload_enabled(self, clean_env):
        """Test uploads need endpoint, public key and private key."""
        assert Settings(_env_file=None, imagekit_private_key="private").has_upload_enabled is False

        test_settings = Settings(
            _env_file=None,
            imagekit_url_endpoint="https://ik.imagekit.io/demo",
            imagekit_public_key="public",
            imagekit_private_key="private",
        )
        assert test_settings.has_upload_enabled is True

    def test_has_token_verification_key(self, clean_env):
        assert Settings(_env_file=None).has_token_verification_key is False
        assert (
            Settings(_env_file=None, clerk_jwks_url="https://clerk.example/.well-known/jwks.json")
            .has_token_verification_key
            is True
        )

    def test_jwt_key_newlines_are_unescaped(self, clean_env):
        """Test literal \\n sequences in the PEM key become newlines."""
        test_settings = Settings(_env_file=None, clerk_jwt_key="-----BEGIN PUBLIC KEY-----\\nabc\\n-----END PUBLIC KEY-----")

        assert test_settings.clerk_jwt_key == "-----BEGIN PUBLIC KEY-----\nabc\n-----END PUBLIC KEY-----"

    @pytest.mark.parametrize("length", [0, 41])
    def test_title_length_bounds(self, clean_env, length):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, conversation_title_max_length=length)

    def test_append_retries_must_be_positive(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, append_max_retries=0)

    def test_env_variables_override_defaults(self, clean_env, monkeypatch):
        """Test values are read from the environment, case-insensitively."""
        monkeypatch.setenv("CONVERSATION_TITLE_MAX_LENGTH", "30")
        monkeypatch.setenv("log_format", "json")

        test_settings = Settings(_env_file=None)

        assert test_settings.conversation_title_max_length == 30
        assert test_settings.log_format == LogFormatEnum.json


class TestConfigValidator:
    """Test cases for ConfigValidator."""

    def test_validate_required_settings_success(self, clean_env):
        configured = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://u:p@localhost/chat",
            clerk_jwt_key="pem",
        )

        with patch("app.core.config.settings", configured):
            ConfigValidator.validate_required_settings()

    def test_validate_required_settings_missing(self, clean_env):
        """Test every missing setting is reported."""
        unconfigured = Settings(_env_file=None, database_url=None, environment="production")

        with patch("app.core.config.settings", unconfigured):
            with pytest.raises(ValueError) as exc_info:
                ConfigValidator.validate_required_settings()

        message = str(exc_info.value)
        assert "DATABASE_URL is required" in message
        assert "CLERK_JWT_KEY or CLERK_JWKS_URL is required" in message
        assert "IMAGEKIT_* settings are required in production" in message

    def test_get_feature_status(self, clean_env):
        configured = Settings(_env_file=None, clerk_jwks_url="https://clerk.example/jwks")

        with patch("app.core.config.settings", configured):
            status = ConfigValidator.get_feature_status()

        assert status == {
            "upload_enabled": False,
            "token_verification": True,
            "environment": EnvironmentEnum.development,
        }

    def test_get_config_summary(self, clean_env):
        configured = Settings(_env_file=None, database_url="sqlite+aiosqlite:///./chat.db")

        with patch("app.core.config.settings", configured):
            summary = get_config_summary()

        assert summary["app_name"] == "AI Chat API"
        assert summary["database_configured"] is True
        assert summary["auth_configured"] is False
        assert "features" in summary
