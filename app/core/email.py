"""Outgoing e-mail for payment reminders. Delivery is optional: no SMTP server, no e-mail."""
import logging
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

import aiosmtplib

from app.core.config import settings

logger = logging.getLogger(__name__)


def is_email_configured() -> bool:
    """Reminder e-mails need an SMTP server and a recipient."""
    return bool(settings.MAIL_SERVER and settings.REMINDER_EMAIL_TO)


def _build_message(to_email: str, subject: str, text_body: str, html_body: Optional[str]) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = f"{settings.MAIL_FROM_NAME} <{settings.MAIL_FROM}>"
    message["To"] = to_email
    message["Subject"] = subject
    # Plain part first: clients show the last part they can render
    message.attach(MIMEText(text_body, "plain"))
    if html_body is not None:
        message.attach(MIMEText(html_body, "html"))
    return message


def _connection_options() -> dict:
    """Port 465 is implicit TLS; any other port upgrades with STARTTLS."""
    options = {
        "hostname": settings.MAIL_SERVER,
        "port": settings.MAIL_PORT,
        "username": settings.MAIL_USERNAME or None,
        "password": settings.MAIL_PASSWORD or None,
    }
    if settings.MAIL_PORT == 465:
        options.update(use_tls=True, tls_context=ssl.create_default_context())
    else:
        options["start_tls"] = True
    return options


async def send_email(
    to_email: str,
    subject: str,
    body: str,
    html_body: Optional[str] = None,
) -> bool:
    """
    Send an email asynchronously.

    Args:
        to_email: Recipient email address
        subject: Email subject
        body: Plain-text body
        html_body: Optional HTML alternative

    Returns:
        True if email sent successfully, False otherwise
    """
    message = _build_message(to_email, subject, body, html_body)
    try:
        await aiosmtplib.send(message, **_connection_options())
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s via %s:%s: %s", to_email, settings.MAIL_SERVER, settings.MAIL_PORT, e)
        return False
    logger.info("Email sent to %s: %s", to_email, subject)
    return True


async def send_payment_reminder_email(title: str, body: str) -> bool:
    """Send a payment reminder to the configured admin address."""
    html_body = (
        "<html><body>"
        f"<h2>{escape(title)}</h2>"
        f"<p>{escape(body)}</p>"
        f"<p style=\"color:#888\">Sent automatically by {escape(settings.MAIL_FROM_NAME)}.</p>"
        "</body></html>"
    )
    return await send_email(
        to_email=settings.REMINDER_EMAIL_TO,
        subject=title,
        body=f"{body}\n\nSent automatically by {settings.MAIL_FROM_NAME}.",
        html_body=html_body,
    )
