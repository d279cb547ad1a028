"""
Confirm Password Reset Use Case

Consumes a reset token and replaces the account's credential.
"""

import asyncio
import logging

from playlist_auth.app.services.password_hasher import HashingFailure, PasswordHasher
from playlist_auth.app.services.reset_token_store import ResetTokenStore
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.domain.base import utcnow
from playlist_auth.domain.entities import AuditEvent
from playlist_auth.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse
from .validators import PASSWORD_RULES, matches, validate_fields, validation_error

logger = logging.getLogger(__name__)

RESET_RULES = {
    "new_password": PASSWORD_RULES,
    "new_password_repeat": (matches("new_password"),),
}


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Input is validated before the token is touched, so a typo does not
      burn the token
    - Token is consumed atomically (exactly one caller wins)
    - Expiry is checked against the current time at consumption
    - Salt and digest are both replaced
    - Token deletion and password update commit together
    - Audit event created for security tracking
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(
        self, token: str, new_password: str, new_password_repeat: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from the reset link)
            new_password: New password to set
            new_password_repeat: Confirmation of the new password

        Returns:
            Result with confirmation status, or Error

        Errors:
            - VALIDATION_FAILED: weak password or confirmation mismatch
            - INVALID_OR_EXPIRED_TOKEN: unknown, used or expired token
            - HASHING_FAILURE: new password could not be hashed
        """
        errors = validate_fields(
            RESET_RULES,
            {"new_password": new_password, "new_password_repeat": new_password_repeat},
        )
        if errors:
            return Return.err(validation_error(errors))

        async with self.uow:
            store = ResetTokenStore(self.uow.password_reset_tokens)
            consumed = await store.consume(token)
            if consumed.is_err():
                return Return.err(
                    Error(
                        "INVALID_OR_EXPIRED_TOKEN",
                        "Invalid or expired password reset token",
                    )
                )

            user = await self.uow.users.get_by_id(consumed.value)
            if user is None:
                # Foreign key makes this unreachable unless the user was just deleted
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            try:
                salt, digest = await asyncio.to_thread(self.hasher.hash, new_password)
            except HashingFailure:
                # Leaving the block rolls back the consumption as well
                return Return.err(Error("HASHING_FAILURE", "Password hashing failed"))

            user.salt = salt
            user.password_hash = digest
            user.password_changed_at = utcnow()
            await self.uow.users.update(user)

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_confirmed",
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            logger.info(f"Password reset completed for user {user.id}")

            return Return.ok(
                ConfirmPasswordResetResponse(
                    status="success",
                    message="Password has been reset successfully",
                )
            )
