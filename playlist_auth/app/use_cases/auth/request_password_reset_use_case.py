"""
Request Password Reset Use Case

Issues a reset token and mails the reset link to the account owner.
"""

import logging
from datetime import timedelta
from urllib.parse import urlencode

from playlist_auth.app.services.mail_sender import MailDeliveryStatus, MailSender
from playlist_auth.app.services.reset_token_store import ResetTokenStore
from playlist_auth.app.services.unit_of_work import UnitOfWork
from playlist_auth.domain.entities import AuditEvent
from playlist_auth.libs.result import Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

GENERIC_RESPONSE = RequestPasswordResetResponse(
    status="sent",
    message="If the account exists, a password reset link has been sent",
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Identifier is an email address (contains "@") or a username; an
      identifier with "@" that matches no email is tried as a username
    - Token expires 30 minutes after issuance
    - No account enumeration (same response for known/unknown accounts)
    - Token is committed before the mail goes out
    - Delivery status is audited and logged, never retried, never returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mail_sender: MailSender,
        reset_link_base_url: str,
        reset_token_ttl: timedelta = timedelta(minutes=30),
    ):
        self.uow = uow
        self.mail_sender = mail_sender
        self.reset_link_base_url = reset_link_base_url
        self.reset_token_ttl = reset_token_ttl

    def _build_reset_link(self, token: str, email: str) -> str:
        return f"{self.reset_link_base_url}?{urlencode({'token': token, 'email': email})}"

    async def execute(self, identifier: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            identifier: Email address or username

        Returns:
            Result with the generic reset response
        """
        identifier = identifier.strip()

        async with self.uow:
            user = None
            if "@" in identifier:
                user = await self.uow.users.get_by_email(identifier.lower())
            if user is None:
                # Usernames may contain "@" too
                user = await self.uow.users.get_by_username(identifier)

            if user is None:
                logger.info("Password reset requested for unknown account")
                return Return.ok(GENERIC_RESPONSE)

            store = ResetTokenStore(self.uow.password_reset_tokens, ttl=self.reset_token_ttl)
            reset_token = await store.issue(user.id)
            await self.uow.commit()

            delivery_status = await self.mail_sender.send_password_reset(
                recipient=user.email,
                username=user.username,
                reset_link=self._build_reset_link(reset_token, user.email),
            )
            if delivery_status != MailDeliveryStatus.sent:
                logger.error(f"Password reset mail for user {user.id} was not delivered")

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_requested",
                event_metadata={"delivery_status": delivery_status.value},
            )
            await self.uow.audit_events.create(audit_event)
            await self.uow.commit()

            return Return.ok(GENERIC_RESPONSE)
