"""
Playlist Auth Domain Entities

Each entity in its own file.
"""

from .user import User
from .password_reset_token import PasswordResetToken
from .audit_event import AuditEvent

__all__ = [
    "User",
    "PasswordResetToken",
    "AuditEvent",
]
