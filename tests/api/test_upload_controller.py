"""API tests for the upload credentials endpoint."""

import hashlib
import hmac
import time
from unittest.mock import patch

import pytest
from fastapi import status
from httpx import AsyncClient


class TestUploadController:
    """Test cases for GET /api/upload."""

    @pytest.mark.asyncio
    async def test_get_upload_credentials(self, authenticated_client: AsyncClient):
        """Test signed upload parameters are returned."""
        response = await authenticated_client.get("/api/upload")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert set(data) == {"token", "expire", "signature"}
        expected = hmac.new(
            b"private_test_key", f"{data['token']}{data['expire']}".encode(), hashlib.sha1
        ).hexdigest()
        assert data["signature"] == expected
        assert data["expire"] > int(time.time())

    @pytest.mark.asyncio
    async def test_get_upload_credentials_fresh_token(self, authenticated_client: AsyncClient):
        first = await authenticated_client.get("/api/upload")
        second = await authenticated_client.get("/api/upload")

        assert first.json()["token"] != second.json()["token"]

    @pytest.mark.asyncio
    async def test_get_upload_credentials_unauthenticated(self, client: AsyncClient):
        """Test upload credentials require authentication."""
        response = await client.get("/api/upload")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_get_upload_credentials_not_configured(self, authenticated_client: AsyncClient):
        """Test a missing private key is reported as 503."""
        with patch("app.domains.upload.service.settings.imagekit_private_key", None):
            response = await authenticated_client.get("/api/upload")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error_code"] == "UPLOAD_NOT_CONFIGURED"

    @pytest.mark.asyncio
    async def test_health_and_upload_agree_on_configuration(self, authenticated_client: AsyncClient):
        """Test a missing public key disables uploads and is reported by the health check."""
        with patch("app.core.config.settings.imagekit_public_key", None):
            upload = await authenticated_client.get("/api/upload")
            health = await authenticated_client.get("/health")

        assert upload.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert health.json()["services"]["uploads"] == "not_configured"

    @pytest.mark.asyncio
    async def test_health_reports_configured_uploads(self, authenticated_client: AsyncClient):
        health = await authenticated_client.get("/health")

        assert health.json()["services"]["uploads"] == "configured"
