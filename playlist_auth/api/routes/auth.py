from datetime import timedelta

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from playlist_auth.api.error import ClientError, ServerError
from playlist_auth.app.services.mail_sender import MailSender
from playlist_auth.app.services.password_hasher import PasswordHasher
from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.app.use_cases.auth import (
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    LoginResponse,
    LoginUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
)
from playlist_auth.depends import (
    get_mail_sender,
    get_password_hasher,
    get_session_token_issuer,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Field rules (length, email syntax, password strength) are applied by the
    use case so all failures come back as one structured list.
    """

    username: str = Field(..., description="Unique username (1-100 chars)")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Password (min 8 chars, mixed case, digit)")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    User Registration

    Creates a new account with a salted password digest.

    Raises:
        - 400 Bad Request: Field validation failed
        - 409 Conflict: Username or email already in use
        - 500 Internal Server Error: Hashing or server error
    """
    command = RegisterCommand(
        username=request.username, email=request.email, password=request.password
    )

    use_case = RegisterUseCase(uow, hasher)
    result = await use_case.execute(command)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    username: str = Field(..., description="Username")
    password: str = Field(..., max_length=1024, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: SessionTokenIssuer = Depends(get_session_token_issuer),
):
    """
    User Login

    Verifies credentials and returns a session token. The token is also set
    as an httpOnly cookie for browser clients.

    Raises:
        - 401 Unauthorized: Invalid username or password
        - 500 Internal Server Error: Hashing or server error
    """
    use_case = LoginUseCase(uow, hasher, token_issuer)
    result = await use_case.execute(request.username, request.password)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    login_response = result.value
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=login_response.access_token,
        max_age=int(token_issuer.ttl.total_seconds()),
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return login_response


class LogoutResponse(BaseModel):
    status: str
    message: str


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(response: Response):
    """
    Clears the session cookie.

    The token itself stays valid until it expires; there is no server-side
    revocation.
    """
    response.delete_cookie(key=ApplicationConfig.SESSION_COOKIE_NAME)
    return LogoutResponse(status="success", message="User logged out!")


class RequestPasswordResetRequest(BaseModel):
    """Request password reset HTTP request payload"""

    identifier: str = Field(..., min_length=1, description="Email address or username")


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mail_sender: MailSender = Depends(get_mail_sender),
):
    """
    Request Password Reset

    Issues a single-use reset token valid for 30 minutes and mails the reset
    link to the account owner.

    Security:
        - No account enumeration (same response for known/unknown accounts)

    Returns:
        - 200 OK: Always returns success (no enumeration)
        - 500 Internal Server Error: Server error
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        mail_sender,
        reset_link_base_url=ApplicationConfig.RESET_LINK_BASE_URL,
        reset_token_ttl=timedelta(minutes=ApplicationConfig.RESET_TOKEN_TTL_MINUTES),
    )
    result = await use_case.execute(request.identifier)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """Confirm password reset HTTP request payload"""

    token: str = Field(..., description="Password reset token from email")
    new_password: str = Field(..., description="New password")
    new_password_repeat: str = Field(..., description="New password, repeated")


@router.post(
    "/confirm-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Confirm Password Reset

    Consumes the reset token and replaces the stored credential.

    Raises:
        - 400 Bad Request: Validation failed, or invalid/used/expired token
        - 500 Internal Server Error: Hashing or server error
    """
    use_case = ConfirmPasswordResetUseCase(uow, hasher)
    result = await use_case.execute(
        request.token, request.new_password, request.new_password_repeat
    )

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code in ("VALIDATION_FAILED", "INVALID_OR_EXPIRED_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
