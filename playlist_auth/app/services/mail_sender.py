from abc import ABC, abstractmethod
from enum import Enum


class MailDeliveryStatus(str, Enum):
    """Opaque outcome reported by the mail transport"""

    sent = "sent"
    failed = "failed"


class MailSender(ABC):
    """Outbound mail port - application layer"""

    @abstractmethod
    async def send_password_reset(
        self, recipient: str, username: str, reset_link: str
    ) -> MailDeliveryStatus:
        """
        Send one password reset message containing `reset_link`.

        Never retries and never raises for transport failures; the outcome
        is reported as a MailDeliveryStatus.
        """
        pass
