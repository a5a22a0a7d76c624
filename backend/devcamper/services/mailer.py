"""
Email Service

Sends plain-text transactional email (password reset links) over SMTP
using aiosmtplib.
"""
import logging
from email.message import EmailMessage

import aiosmtplib

from ..config import Settings

logger = logging.getLogger("uvicorn.error")


class MailService:
    """SMTP mail sender configured from Settings"""

    def __init__(self, settings: Settings):
        self.host = settings.email_host
        self.port = settings.email_port
        self.username = settings.email_username
        self.password = settings.email_password
        self.sender = f"{settings.from_name} <{settings.from_email}>"

    def is_available(self) -> bool:
        """Check if an SMTP host is configured"""
        return bool(self.host)

    def build_message(self, to: str, subject: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        return message

    async def send(self, to: str, subject: str, text: str) -> None:
        """
        Send one email.

        Raises:
            RuntimeError: if no SMTP host is configured
            aiosmtplib.SMTPException: on delivery failure
        """
        if not self.is_available():
            raise RuntimeError("EMAIL_HOST is missing")

        message = self.build_message(to, subject, text)
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.port == 465,
        )
        logger.info("[mail] message sent to=%s subject=%s", to, subject)
