"""
User Entity

Account that owns playlists and holds the login credential.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from playlist_auth.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - account plus its password credential.

    Business Rules:
    - Username and email are unique (enforced by table constraints)
    - Password stored as bcrypt digest together with its salt
    - Salt is regenerated on every password change
    - Email stored lower-cased
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=100)

    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    salt: str = Field(max_length=29)  # Bcrypt salt prefix "$2b$12$" + 22 chars

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
