"""Upload API controller with FastAPI endpoints."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_owner_id
from app.domains.upload.service import UploadCredentialIssuer

router = APIRouter(prefix="/api", tags=["upload"])


@router.get("/upload")
async def get_upload_credentials(_owner_id: str = Depends(get_current_owner_id)):
    """Return signed parameters for a direct ImageKit upload."""
    return UploadCredentialIssuer().get_authentication_parameters().model_dump()
