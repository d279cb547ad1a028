"""
Change Password Use Case

Sets a new password for an authenticated user.
"""

import asyncio
from uuid import UUID

from playlist_auth.app.services.password_hasher import HashingFailure, PasswordHasher
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.app.use_cases.auth.validators import (
    PASSWORD_RULES,
    matches,
    validate_fields,
    validation_error,
)
from playlist_auth.domain.base import utcnow
from playlist_auth.domain.entities import AuditEvent
from playlist_auth.libs.result import Error, Result, Return
from .dtos import ChangePasswordResponse

CHANGE_RULES = {
    "new_password": PASSWORD_RULES,
    "new_password_repeat": (matches("new_password"),),
}


class ChangePasswordUseCase:
    """
    Use case for changing the password of a logged in user.

    Business Rules:
    - Current password must verify
    - New password must pass the strength rules and match its repetition
    - Salt and digest are both replaced
    - Existing session tokens stay valid until they expire
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        new_password_repeat: str,
    ) -> Result[ChangePasswordResponse]:
        errors = validate_fields(
            CHANGE_RULES,
            {"new_password": new_password, "new_password_repeat": new_password_repeat},
        )
        if errors:
            return Return.err(validation_error(errors))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            try:
                current_valid = await asyncio.to_thread(
                    self.hasher.verify, current_password, user.salt, user.password_hash
                )
                if not current_valid:
                    return Return.err(
                        Error("INVALID_CREDENTIALS", "Current password is incorrect")
                    )
                salt, digest = await asyncio.to_thread(self.hasher.hash, new_password)
            except HashingFailure:
                return Return.err(Error("HASHING_FAILURE", "Password hashing failed"))

            user.salt = salt
            user.password_hash = digest
            user.password_changed_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, action="password_changed")
            )

            await self.uow.commit()

            return Return.ok(
                ChangePasswordResponse(status="success", message="Password updated!")
            )
