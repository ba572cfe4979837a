"""Signed upload credentials for client-side image uploads."""

import logging
import time
import uuid

from imagekitio import ImageKit

from app.core.config import settings
from app.exceptions.upload import UploadConfigurationError
from app.schemas.conversation import UploadAuthResponse

logger = logging.getLogger(__name__)


class UploadCredentialIssuer:
    """Issues ImageKit client-upload authentication parameters.

    The browser uploads images straight to ImageKit; this service only asks
    the ImageKit SDK to sign a one-time ``token`` and its ``expire``
    timestamp with the account's private key.
    """

    def __init__(
        self,
        private_key: str | None = None,
        public_key: str | None = None,
        url_endpoint: str | None = None,
        ttl_seconds: int | None = None,
    ):
        self.private_key = private_key if private_key is not None else settings.imagekit_private_key
        self.public_key = public_key if public_key is not None else settings.imagekit_public_key
        self.url_endpoint = url_endpoint if url_endpoint is not None else settings.imagekit_url_endpoint
        self.ttl_seconds = ttl_seconds or settings.upload_token_ttl_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.private_key and self.public_key and self.url_endpoint)

    def get_authentication_parameters(self, token: str | None = None, expire: int | None = None) -> UploadAuthResponse:
        """Return signed upload parameters.

        Args:
            token: One-time token, a fresh uuid4 hex string by default
            expire: Unix timestamp after which the signature is rejected

        Raises:
            UploadConfigurationError: If the ImageKit keys or endpoint are missing
        """
        if not self.is_configured:
            logger.warning("Upload credentials requested but ImageKit is not configured")
            raise UploadConfigurationError()

        imagekit = ImageKit(
            private_key=self.private_key,
            public_key=self.public_key,
            url_endpoint=self.url_endpoint,
        )
        params = imagekit.get_authentication_parameters(
            token=token or uuid.uuid4().hex,
            expire=expire or int(time.time()) + self.ttl_seconds,
        )

        return UploadAuthResponse(token=params["token"], expire=int(params["expire"]), signature=params["signature"])
