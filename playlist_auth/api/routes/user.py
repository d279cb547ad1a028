from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from playlist_auth.api.error import ClientError, ServerError
from playlist_auth.api.utils.auth_gate import Identity
from playlist_auth.app.services.password_hasher import PasswordHasher
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.app.use_cases.users import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    LoadProfileUseCase,
    ProfileResponse,
)
from playlist_auth.depends import (
    get_current_identity,
    get_password_hasher,
    get_unit_of_work,
)

router = APIRouter(prefix="/users", tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Load the logged in user's profile.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired session token
        - 404 Not Found: Account no longer exists
    """
    use_case = LoadProfileUseCase(uow)
    result = await use_case.execute(identity.user_id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    current_password: str = Field(..., max_length=1024, description="Current password")
    new_password: str = Field(..., description="New password")
    new_password_repeat: str = Field(..., description="New password, repeated")


@router.post(
    "/me/password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse
)
async def change_password(
    request: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Set a new password for the logged in user.

    Raises:
        - 400 Bad Request: Validation failed
        - 401 Unauthorized: Not authenticated, or current password incorrect
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Hashing or server error
    """
    use_case = ChangePasswordUseCase(uow, hasher)
    result = await use_case.execute(
        identity.user_id,
        request.current_password,
        request.new_password,
        request.new_password_repeat,
    )

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class DeleteAccountRequest(BaseModel):
    """Delete account HTTP request payload"""

    current_password: str = Field(..., max_length=1024, description="Current password")


@router.delete("/me", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse)
async def delete_me(
    request: DeleteAccountRequest,
    response: Response,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Delete the logged in user's account and its pending reset tokens.

    Raises:
        - 401 Unauthorized: Not authenticated, or current password incorrect
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Hashing or server error
    """
    use_case = DeleteAccountUseCase(uow, hasher)
    result = await use_case.execute(identity.user_id, request.current_password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    response.delete_cookie(key=ApplicationConfig.SESSION_COOKIE_NAME)
    return result.value
