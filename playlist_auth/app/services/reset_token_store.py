"""
Reset Token Store

Issues and consumes single-use password reset tokens.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

from playlist_auth.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from playlist_auth.domain.base import utcnow
from playlist_auth.domain.entities import PasswordResetToken
from playlist_auth.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32


def hash_reset_token(token: str) -> str:
    """SHA-256 hex digest under which a plain reset token is stored"""
    return hashlib.sha256(token.encode()).hexdigest()


class ResetTokenStore:
    """
    Owns the password reset token records.

    Business Rules:
    - Tokens are 32 random bytes, URL-safe encoded, stored only as SHA-256
    - A token is valid iff its row exists and now < expires_at
    - consume() deletes the row in one conditional statement, so of any
      number of concurrent consumers exactly one succeeds
    - Expiry is decided here at consume time, never by the sweeper
    - Consuming one token leaves the user's other outstanding tokens intact
    """

    def __init__(
        self,
        repository: IPasswordResetTokenRepository,
        ttl: timedelta = timedelta(minutes=30),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.ttl = ttl
        self.clock = clock

    async def issue(self, user_id: UUID) -> str:
        """
        Create a reset token for a user.

        Returns:
            The plain token (to be embedded in the reset link, never stored)
        """
        token = secrets.token_urlsafe(RESET_TOKEN_BYTES)
        now = self.clock()

        record = PasswordResetToken(
            user_id=user_id,
            token_hash=hash_reset_token(token),
            created_at=now,
            expires_at=now + self.ttl,
        )
        await self.repository.create(record)
        logger.info(f"Issued password reset token {record.id} for user {user_id}")
        return token

    async def consume(self, token: str) -> Result[UUID]:
        """
        Atomically validate and invalidate a reset token.

        Returns:
            Result with the owning user id, or Error

        Errors:
            - TOKEN_ALREADY_USED_OR_EXPIRED: unknown, already consumed, or expired
        """
        user_id = await self.repository.delete_if_valid(
            hash_reset_token(token), self.clock()
        )
        if user_id is None:
            return Return.err(
                Error(
                    "TOKEN_ALREADY_USED_OR_EXPIRED",
                    "Password reset token is invalid, already used or expired",
                )
            )
        return Return.ok(user_id)

    async def purge_expired(self) -> int:
        """Delete expired records. Storage hygiene only."""
        return await self.repository.delete_expired(self.clock())
