# app/core/dependencies.py
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import ClerkAuthenticator
from app.database import get_db
from app.domains.chat.service import ConversationService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)
auth = ClerkAuthenticator()


async def validate_token(token: HTTPAuthorizationCredentials | None = Depends(security)) -> dict:
    """Validate and decode JWT token from Clerk.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    try:
        if not token or not token.credentials:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication token is required",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # Verify token with Clerk
        payload = await auth.verify_token(token.credentials)

        if not payload:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return payload

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_owner_id(
    request: Request,
    payload: dict = Depends(validate_token),
) -> str:
    """Get the identifier of the authenticated user from the JWT payload.

    Returns:
        str: Stable Clerk user id (the ``sub`` claim)

    Raises:
        HTTPException: If the payload carries no user id
    """
    owner_id = payload.get("sub")

    if not owner_id or not isinstance(owner_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload - missing user ID",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Add user info to request state for logging
    request.state.owner_id = owner_id
    return owner_id


async def get_conversation_service(db: AsyncSession = Depends(get_db)) -> ConversationService:
    """Build the conversation service for the request's database session."""
    return ConversationService(db)
