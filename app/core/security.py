"""Security related functions."""

import httpx
import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings

CLERK_ALGORITHMS = ["RS256"]
CLOCK_SKEW_SECONDS = 5


class ClerkAuthenticator:
    """
    Handles Clerk session token verification.

    Clerk signs session tokens with RS256. A token is verified either against
    the PEM public key from the Clerk dashboard (``CLERK_JWT_KEY``, no network
    round trip) or against the instance JWKS fetched from ``CLERK_JWKS_URL``.
    The verified ``sub`` claim is the stable user identifier every
    conversation is scoped to.

    :ivar jwt_key: PEM encoded public key, when configured.
    :type jwt_key: str
    :ivar jwks_url: URL of the Clerk JWKS document, when configured.
    :type jwks_url: str
    """

    def __init__(self):
        self.jwt_key = settings.clerk_jwt_key
        self.jwks_url = settings.clerk_jwks_url
        self.authorized_parties = settings.clerk_authorized_parties_list

    async def get_jwks(self) -> dict:
        """Get JWKS from Clerk for token verification."""
        async with httpx.AsyncClient() as client:
            response = await client.get(self.jwks_url)
            response.raise_for_status()
            return response.json()

    async def get_signing_key(self, token: str):
        """Resolve the public key that signed ``token``."""
        if self.jwt_key:
            return self.jwt_key
        if not self.jwks_url:
            raise InvalidTokenError("No Clerk verification key configured")

        kid = jwt.get_unverified_header(token).get("kid")
        jwks = await self.get_jwks()
        for key_data in jwks.get("keys", []):
            if key_data.get("kid") == kid:
                return jwt.PyJWK(key_data).key
        raise InvalidTokenError(f"Signing key '{kid}' not found in JWKS")

    async def verify_token(self, token: str) -> dict:
        """
        Verifies a Clerk session token and returns its decoded payload.

        Signature, expiry and not-before are always checked; the ``azp`` claim
        is checked against ``CLERK_AUTHORIZED_PARTIES`` when that list is set.
        Any failure raises an HTTPException with status 401.

        :param token: The JWT token to be verified.
        :return: A dictionary containing the decoded payload of the token.
        """
        try:
            key = await self.get_signing_key(token)
            payload = jwt.decode(
                token,
                key=key,
                algorithms=CLERK_ALGORITHMS,
                leeway=CLOCK_SKEW_SECONDS,
                options={"require": ["exp", "sub"], "verify_aud": False},
            )
            if self.authorized_parties and payload.get("azp") not in self.authorized_parties:
                raise InvalidTokenError("Token was issued for an unauthorized party")
            return payload
        except (InvalidTokenError, httpx.HTTPError) as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
