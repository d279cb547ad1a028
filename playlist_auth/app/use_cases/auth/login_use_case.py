"""
Login Use Case

Verifies a username/password pair and issues a session token.
"""

import asyncio

from playlist_auth.app.services.password_hasher import HashingFailure, PasswordHasher
from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.domain.entities import AuditEvent
from playlist_auth.libs.result import Error, Result, Return
from .dtos import LoginResponse


class LoginUseCase:
    """
    Use case for user login and session token issuance.

    Business Rules:
    - Unknown username and wrong password give the same error
    - A dummy verification runs for unknown usernames to keep timing equal
    - Digest comparison is constant-time
    - A hashing failure is an internal error, never "invalid credentials"
    - Session token expires 24 hours after issuance
    """

    def __init__(
        self, uow: UnitOfWork, hasher: PasswordHasher, token_issuer: SessionTokenIssuer
    ):
        self.uow = uow
        self.hasher = hasher
        self.token_issuer = token_issuer

    async def execute(self, username: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            username: Account username
            password: Plain text password

        Returns:
            Result with LoginResponse containing the session token, or Error

        Errors:
            - INVALID_CREDENTIALS: unknown username or wrong password
            - HASHING_FAILURE: password could not be verified
        """
        async with self.uow:
            user = await self.uow.users.get_by_username(username.strip())

            try:
                if user is None:
                    await asyncio.to_thread(self.hasher.dummy_verify, password)
                    return Return.err(
                        Error("INVALID_CREDENTIALS", "Invalid username or password")
                    )

                password_valid = await asyncio.to_thread(
                    self.hasher.verify, password, user.salt, user.password_hash
                )
            except HashingFailure:
                return Return.err(
                    Error("HASHING_FAILURE", "Password verification failed")
                )

            if not password_valid:
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            issued = self.token_issuer.issue(user.id)

            audit = AuditEvent(
                user_id=user.id,
                action="login",
                event_metadata={"username": user.username},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                LoginResponse(
                    status="success",
                    message="User logged in!",
                    access_token=issued.token,
                    token_type="bearer",
                    expires_at=issued.expires_at,
                )
            )
