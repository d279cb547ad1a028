import asyncio
import logging

from playlist_auth.app.repositories.user_repository import DuplicateUserError
from playlist_auth.app.services.password_hasher import HashingFailure, PasswordHasher
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.domain.entities import AuditEvent, User
from playlist_auth.libs.result import Error, Result, Return
from .dtos import RegisterCommand, RegisterResponse, UserInfo
from .validators import (
    EMAIL_RULES,
    PASSWORD_RULES,
    USERNAME_RULES,
    validate_fields,
    validation_error,
)

logger = logging.getLogger(__name__)

REGISTER_RULES = {
    "username": USERNAME_RULES,
    "email": EMAIL_RULES,
    "password": PASSWORD_RULES,
}


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand
    - Output: Result[RegisterResponse]

    Business Logic:
    1. Validate username, email, password
    2. Check username, then email, is not in use (fast path only)
    3. Hash password with a fresh salt
    4. Create User; the table's unique constraints are the real guard
    5. Create AuditEvent with action=register
    6. Commit transaction
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Returns:
            Result[RegisterResponse], or Error

        Errors:
            - VALIDATION_FAILED: field errors in details
            - ALREADY_EXISTS: username or email in use
            - HASHING_FAILURE: password could not be hashed
        """
        errors = validate_fields(REGISTER_RULES, command.model_dump())
        if errors:
            return Return.err(validation_error(errors))

        username = command.username.strip()
        email = command.email.strip().lower()

        async with self.uow:
            if await self.uow.users.get_by_username(username):
                return Return.err(Error("ALREADY_EXISTS", "Username already in use!"))

            if await self.uow.users.get_by_email(email):
                return Return.err(Error("ALREADY_EXISTS", "Email already in use!"))

            try:
                salt, digest = await asyncio.to_thread(self.hasher.hash, command.password)
            except HashingFailure:
                return Return.err(Error("HASHING_FAILURE", "Password hashing failed"))

            user = User(
                username=username,
                email=email,
                password_hash=digest,
                salt=salt,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateUserError:
                # Lost a race with a concurrent registration
                return Return.err(
                    Error("ALREADY_EXISTS", "Username or email already in use!")
                )

            audit_event = AuditEvent(
                user_id=user.id,
                action="register",
                event_metadata={"username": username, "email": email},
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            logger.info(f"Registered user {user.id}")

            return Return.ok(
                RegisterResponse(
                    status="success",
                    message="User registered!",
                    user=UserInfo(id=str(user.id), username=user.username, email=user.email),
                )
            )
