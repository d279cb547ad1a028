"""
Delete Account Use Case

Removes the authenticated user's account after re-checking the password.
"""

import asyncio
import logging
from uuid import UUID

from playlist_auth.app.services.password_hasher import HashingFailure, PasswordHasher
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.domain.entities import AuditEvent
from playlist_auth.libs.result import Error, Result, Return
from .dtos import DeleteAccountResponse

logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """
    Use case for deleting the logged in user's account.

    Business Rules:
    - Current password must verify
    - Outstanding reset tokens are deleted with the user, in one transaction
    - Audit event keeps the deleted user's id
    - Existing session tokens stay signed but no longer resolve to a user
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(
        self, user_id: UUID, current_password: str
    ) -> Result[DeleteAccountResponse]:
        """
        Errors:
            - USER_NOT_FOUND: account already gone
            - INVALID_CREDENTIALS: current password incorrect
            - HASHING_FAILURE: password could not be verified
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            try:
                password_valid = await asyncio.to_thread(
                    self.hasher.verify, current_password, user.salt, user.password_hash
                )
            except HashingFailure:
                return Return.err(Error("HASHING_FAILURE", "Password verification failed"))

            if not password_valid:
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            purged = await self.uow.password_reset_tokens.delete_for_user(user.id)
            await self.uow.users.delete(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="account_deleted",
                    event_metadata={
                        "username": user.username,
                        "reset_tokens_deleted": purged,
                    },
                )
            )

            await self.uow.commit()

            logger.info(f"Deleted account {user_id}")

            return Return.ok(DeleteAccountResponse(status="success", message="User deleted!"))
