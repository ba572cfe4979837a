"""Unit tests for the upload credential issuer."""

import hashlib
import hmac
import time

import pytest

from app.domains.upload.service import UploadCredentialIssuer
from app.exceptions.upload import UploadConfigurationError


@pytest.fixture
def issuer():
    return UploadCredentialIssuer(
        private_key="private_key_123",
        public_key="public_key_123",
        url_endpoint="https://ik.imagekit.io/demo",
    )


class TestUploadCredentialIssuer:
    """Test cases for UploadCredentialIssuer."""

    def test_signature_matches_imagekit_protocol(self, issuer):
        """Test the signature is HMAC-SHA1 of token + expire with the private key."""
        result = issuer.get_authentication_parameters(token="abc123", expire=1700000000)

        expected = hmac.new(b"private_key_123", b"abc1231700000000", hashlib.sha1).hexdigest()
        assert result.token == "abc123"
        assert result.expire == 1700000000
        assert result.signature == expected

    def test_default_expiry_is_thirty_minutes(self, issuer):
        before = int(time.time())
        result = issuer.get_authentication_parameters()
        after = int(time.time())

        assert before + 1800 <= result.expire <= after + 1800

    def test_custom_ttl(self):
        issuer = UploadCredentialIssuer(
            private_key="private_key_123",
            public_key="public_key_123",
            url_endpoint="https://ik.imagekit.io/demo",
            ttl_seconds=60,
        )

        result = issuer.get_authentication_parameters()

        assert result.expire <= int(time.time()) + 60

    def test_tokens_are_unique(self, issuer):
        tokens = {issuer.get_authentication_parameters().token for _ in range(10)}

        assert len(tokens) == 10
        assert all(len(token) == 32 for token in tokens)

    @pytest.mark.parametrize(
        "overrides",
        [{"private_key": ""}, {"public_key": ""}, {"url_endpoint": ""}],
    )
    def test_incomplete_configuration(self, overrides):
        """Test issuing credentials needs the private key, public key and endpoint."""
        values = {
            "private_key": "private_key_123",
            "public_key": "public_key_123",
            "url_endpoint": "https://ik.imagekit.io/demo",
        }
        values.update(overrides)
        issuer = UploadCredentialIssuer(**values)

        assert issuer.is_configured is False
        with pytest.raises(UploadConfigurationError):
            issuer.get_authentication_parameters()
