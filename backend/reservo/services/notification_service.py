"""
Notification Service - send email through an SMTP server.
"""

import logging
import smtplib
from email.message import EmailMessage

from reservo.config import NotificationsSettings
from reservo.core.exceptions import UnavailableError
from reservo.dtos.notification import NotifyEmailRequest

logger = logging.getLogger(__name__)

SUBJECT = "Reservo Notification"


class NotificationService:
    """Sends plain-text notification emails from the configured SMTP account."""

    def __init__(self, settings: NotificationsSettings):
        self.host = settings.SMTP_SERVER_HOST
        self.port = settings.SMTP_SERVER_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASS
        self.starttls = settings.SMTP_STARTTLS
        self.timeout = settings.SMTP_TIMEOUT_SECONDS

    def notify_email(self, payload: NotifyEmailRequest) -> None:
        """
        Send `payload.text` to `payload.email`.

        Raises:
            UnavailableError: If the SMTP server cannot be reached or refuses the message
        """
        message = EmailMessage()
        message["From"] = self.user
        message["To"] = payload.email
        message["Subject"] = SUBJECT
        message.set_content(payload.text)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                smtp.login(self.user, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {payload.email}: {e}")
            raise UnavailableError(f"SMTP delivery failed: {e}", service="smtp") from e

        logger.info(f"Notification email sent to {payload.email}")
