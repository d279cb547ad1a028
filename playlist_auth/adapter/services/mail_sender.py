"""
SMTP mail sender built on fastapi-mail.
"""

import logging
from html import escape

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors

from playlist_auth.app.services.mail_sender import MailDeliveryStatus, MailSender

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Reset your password"

RESET_TEMPLATE = """\
<p>Hi {username},</p>
<p>Someone asked to reset the password of your account. Follow the link below
within 30 minutes to choose a new one:</p>
<p><a href="{link}">{link}</a></p>
<p>If you did not ask for this, you can ignore this message.</p>
"""


class FastMailSender(MailSender):
    """MailSender implementation using fastapi-mail"""

    def __init__(self, config: ConnectionConfig):
        self.mailer = FastMail(config)

    async def send_password_reset(
        self, recipient: str, username: str, reset_link: str
    ) -> MailDeliveryStatus:
        message = MessageSchema(
            subject=RESET_SUBJECT,
            recipients=[recipient],
            body=RESET_TEMPLATE.format(username=escape(username), link=escape(reset_link)),
            subtype=MessageType.html,
        )
        try:
            await self.mailer.send_message(message)
        except ConnectionErrors as error:
            logger.error(f"Failed to send password reset email: {error}")
            return MailDeliveryStatus.failed

        logger.debug("Password reset email handed to SMTP server")
        return MailDeliveryStatus.sent
