"""
PasswordResetToken Entity

Single-use, time-windowed password reset tokens.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from playlist_auth.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - one outstanding reset request.

    Business Rules:
    - Expires 30 minutes after creation
    - Token is stored as SHA-256 hash of a 32-byte random string
    - Single-use: the row is deleted when consumed
    - Expired rows are rejected on read and purged by the sweeper
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)
