"""
User Use Case DTOs
"""

from datetime import datetime

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    """Response for load profile use case"""

    id: str
    username: str
    email: str
    created_at: datetime


class ChangePasswordResponse(BaseModel):
    """Response for change password use case"""

    status: str
    message: str


class DeleteAccountResponse(BaseModel):
    """Response for delete account use case"""

    status: str
    message: str
