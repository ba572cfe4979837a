"""Upload-related exceptions."""

from .base import ServiceUnavailableError


class UploadConfigurationError(ServiceUnavailableError):
    """Raised when signed upload credentials are requested but ImageKit is not configured."""

    def __init__(self, message: str = "Image uploads are not configured"):
        super().__init__(message=message, error_code="UPLOAD_NOT_CONFIGURED")
