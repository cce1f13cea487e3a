"""Outbound e-mail over SMTP."""

import smtplib
from email.mime.text import MIMEText

from helpdesk.settings import settings
from helpdesk.utils.logging_config import logger


def send_email(to: str, subject: str, text: str) -> None:
    """
    Sends a plain-text e-mail with the configured SMTP account.

    Raises:
        smtplib.SMTPException, OSError: On any delivery failure.
    """
    msg = MIMEText(text, "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = settings.EMAIL_USER or "noreply@localhost"
    msg["To"] = to

    if settings.SMTP_PORT == 465:
        server = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
    else:
        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)

    try:
        if settings.SMTP_USE_TLS and settings.SMTP_PORT != 465:
            server.starttls()
        if settings.EMAIL_USER and settings.EMAIL_PASS:
            server.login(settings.EMAIL_USER, settings.EMAIL_PASS)
        server.send_message(msg)
        logger.info(f"Email sent to {to}: {subject}")
    finally:
        server.quit()
