"""Email delivery for the rendered market report.

Sends a multipart (plain text + HTML) message over SMTP with STARTTLS.
Gmail accounts need an App Password.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ..config import EmailSettings
from ..errors import ConfigError, DeliveryError

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Send the daily report via SMTP."""

    def __init__(self, settings: EmailSettings):
        self.smtp_server = settings.smtp_server
        self.smtp_port = settings.smtp_port
        self.sender_email = settings.sender
        self.sender_password = settings.password
        self.recipient_email = settings.recipient or settings.sender
        self.timeout = settings.timeout

        self.enabled = bool(self.sender_email and self.sender_password and self.recipient_email)
        if self.sender_password:
            logger.debug(f"Email password loaded: {len(self.sender_password)} characters")
        if not self.enabled:
            logger.warning("Email delivery disabled - EMAIL_SENDER or EMAIL_PASSWORD not set")
        else:
            logger.info(f"Email delivery enabled - will send to {self.recipient_email}")

    def build_message(self, html: str, plain: str, subject: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"Market Report <{self.sender_email}>"
        msg["To"] = self.recipient_email
        msg.attach(MIMEText(plain, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send_report(self, html: str, plain: str, subject: str) -> None:
        """Deliver one report.

        Raises:
            ConfigError: Credentials are missing.
            DeliveryError: The SMTP exchange failed.
        """
        if not self.enabled:
            raise ConfigError("Email not configured - set EMAIL_SENDER, EMAIL_PASSWORD and EMAIL_RECIPIENT")

        msg = self.build_message(html, plain, subject)
        logger.info("Sending email...")
        try:
            logger.info(f"Connecting to {self.smtp_server}:{self.smtp_port}...")
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.ehlo()
                server.starttls()
                server.ehlo()
                server.login(self.sender_email, self.sender_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as exc:
            raise DeliveryError(
                f"SMTP authentication failed for {self.sender_email}. "
                f"Gmail requires an App Password. Details: {exc}"
            ) from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"Failed to send report: {type(exc).__name__}: {exc}") from exc

        logger.info(f"Report sent to {self.recipient_email}")
