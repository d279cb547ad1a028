"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
"""

from datetime import datetime

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents registration intent

    Created by API layer; field rules are applied by the use case.
    """

    username: str
    email: str
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Public user information"""

    id: str
    username: str
    email: str


class RegisterResponse(BaseModel):
    """Response for register use case"""

    status: str
    message: str
    user: UserInfo


class LoginResponse(BaseModel):
    """Response for login use case"""

    status: str
    message: str
    access_token: str
    token_type: str
    expires_at: datetime


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str
