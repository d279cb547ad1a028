"""
User Use Cases

Operations on the authenticated user's own account.
"""

from .load_profile_use_case import LoadProfileUseCase
from .change_password_use_case import ChangePasswordUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .dtos import ProfileResponse, ChangePasswordResponse, DeleteAccountResponse

__all__ = [
    # Use Cases
    "LoadProfileUseCase",
    "ChangePasswordUseCase",
    "DeleteAccountUseCase",
    # DTOs
    "ProfileResponse",
    "ChangePasswordResponse",
    "DeleteAccountResponse",
]
