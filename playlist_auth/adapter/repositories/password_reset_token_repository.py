from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel.ext.asyncio.session import AsyncSession

from playlist_auth.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from playlist_auth.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def delete_if_valid(self, token_hash: str, now: datetime) -> Optional[UUID]:
        """
        Conditional DELETE ... RETURNING user_id.

        The database serializes concurrent deletes of the same row, so only
        one statement can report it.
        """
        stmt = (
            delete(PasswordResetToken)
            .where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.expires_at > now,
            )
            .returning(PasswordResetToken.user_id)
        )
        result = await self.session.execute(stmt)
        user_id = result.scalar_one_or_none()
        await self.session.flush()
        return user_id

    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every outstanding token of a user"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        """Delete all tokens whose window has closed"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at <= now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
