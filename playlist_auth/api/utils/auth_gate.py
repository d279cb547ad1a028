"""
Auth Gate

Request guard resolving the caller's identity from a session token.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Request, status
from pydantic import BaseModel

from playlist_auth.api.error import ClientError
from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer
from playlist_auth.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

UNAUTHENTICATED = Error("UNAUTHENTICATED", "Not authenticated")


class Identity(BaseModel):
    """Authenticated caller, passed explicitly to route handlers"""

    user_id: UUID


class AuthGate:
    """
    Extracts and verifies the session token carried by a request.

    Business Rules:
    - Token comes from "Authorization: Bearer" or the session cookie;
      the header wins when both are present
    - Every failure (missing, malformed, tampered, expired) is reported to
      the caller as the same UNAUTHENTICATED error
    - No side effects: no refresh, no writes
    """

    def __init__(self, token_issuer: SessionTokenIssuer, cookie_name: str):
        self.token_issuer = token_issuer
        self.cookie_name = cookie_name

    def extract_token(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization")
        if authorization:
            scheme, _, credentials = authorization.partition(" ")
            if scheme.lower() == "bearer" and credentials.strip():
                return credentials.strip()
        return request.cookies.get(self.cookie_name) or None

    def authenticate(self, request: Request) -> Result[Identity]:
        token = self.extract_token(request)
        if token is None:
            return Return.err(UNAUTHENTICATED)

        verified = self.token_issuer.verify(token)
        if verified.is_err():
            logger.info(f"Rejected session token: {verified.error.code}")
            return Return.err(UNAUTHENTICATED)

        try:
            user_id = UUID(verified.value)
        except ValueError:
            logger.info("Rejected session token: subject is not a user id")
            return Return.err(UNAUTHENTICATED)

        return Return.ok(Identity(user_id=user_id))

    def require(self, request: Request) -> Identity:
        """Return the identity or abort the request with 401"""
        result = self.authenticate(request)
        if result.is_err():
            raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)
        return result.value
