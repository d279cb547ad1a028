"""
Load Profile Use Case

Loads the authenticated user's public profile.
"""

from uuid import UUID

from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.libs.result import Error, Result, Return
from .dtos import ProfileResponse


class LoadProfileUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[ProfileResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                # Token outlived the account
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(
                ProfileResponse(
                    id=str(user.id),
                    username=user.username,
                    email=user.email,
                    created_at=user.created_at,
                )
            )
