"""
Outbound email for the booking system.

Plain SMTP with HTML bodies. Callers get a DeliveryError on any failure and
decide for themselves whether it matters; for booking notifications it never
does.
"""

import os
import smtplib
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from dotenv import load_dotenv

from fishing_booking.exceptions import DeliveryError

load_dotenv()

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP"""

    def __init__(self):
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_pass = os.getenv("SMTP_PASS")
        self.smtp_use_tls = os.getenv("SMTP_USE_TLS", "true").lower() in {
            "1",
            "true",
            "yes",
        }
        self.smtp_timeout = float(os.getenv("SMTP_TIMEOUT", "10"))
        self.from_addr = os.getenv("MAIL_FROM") or self.smtp_user
        self.from_name = os.getenv("MAIL_FROM_NAME", "Fishing Booking System")

    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        return bool(self.smtp_host and self.from_addr)

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Send one HTML email.

        Raises:
            DeliveryError: SMTP is not configured or the server refused the message
        """
        if not self.is_configured():
            raise DeliveryError(to, "SMTP is not configured")

        msg = MIMEMultipart("alternative")
        msg["From"] = f"{self.from_name} <{self.from_addr}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(
                self.smtp_host, self.smtp_port, timeout=self.smtp_timeout
            ) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_pass:
                    server.login(self.smtp_user, self.smtp_pass)
                server.sendmail(self.from_addr, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(to, str(e)) from e

        logger.info(f"Email '{subject}' sent to {to}")


email_service = EmailService()
