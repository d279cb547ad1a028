from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from playlist_auth.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def delete_if_valid(self, token_hash: str, now: datetime) -> Optional[UUID]:
        """
        Delete the token row if it exists and has not expired at `now`.

        Must be a single conditional delete so concurrent callers cannot both
        succeed. Returns the owning user_id, or None when nothing was deleted.
        """
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every outstanding token of a user. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete all tokens expired at `now`. Returns count of deleted rows."""
        pass
