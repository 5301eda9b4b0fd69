"""Transactional email delivery over SMTP."""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional
from urllib.parse import urlencode

from socialhub.core.auth.services import redact_email
from socialhub.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends transactional emails.

    When no SMTP host or sender address is configured the service runs in
    development mode: it logs a redacted record of each email instead of
    sending it.
    """

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        from_email: Optional[str] = None,
        from_name: str = "SocialHub",
        frontend_url: str = "http://localhost:3000",
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_email = from_email or smtp_user
        self.from_name = from_name
        self.frontend_url = frontend_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EmailService":
        settings = settings or get_settings()
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            smtp_use_tls=settings.smtp_use_tls,
            from_email=settings.email_from,
            frontend_url=settings.frontend_url,
        )

    @property
    def is_configured(self) -> bool:
        """Check if email sending is properly configured."""
        return bool(self.smtp_host and self.from_email)

    def send_password_reset_email(self, to_email: str, token: str) -> bool:
        """
        Send the password reset link carrying the plaintext ticket.

        Returns:
            True if the email was sent (or logged in development mode)
        """
        reset_link = f"{self.frontend_url}/reset-password?{urlencode({'token': token})}"
        subject = "Reset your SocialHub password"
        text_body = (
            "We received a request to reset your password.\n\n"
            f"Open this link to choose a new password:\n{reset_link}\n\n"
            "The link expires in one hour. If you did not ask for a reset, "
            "you can ignore this email."
        )
        html_body = (
            "<p>We received a request to reset your password.</p>"
            f'<p><a href="{reset_link}">Choose a new password</a></p>'
            "<p>The link expires in one hour. If you did not ask for a reset, "
            "you can ignore this email.</p>"
        )
        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email via SMTP.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.is_configured:
            logger.info(
                "SMTP not configured, email to %s not sent: %s",
                redact_email(to_email),
                subject,
            )
            return True

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        if text_body:
            msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                    server.starttls(context=context)
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
            else:
                with smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, context=context, timeout=30
                ) as server:
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for %s: %s", self.smtp_host, e)
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", redact_email(to_email), e)
            return False

        logger.info("Email sent to %s: %s", redact_email(to_email), subject)
        return True
