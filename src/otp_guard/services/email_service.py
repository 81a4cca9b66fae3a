"""Email service — sends templated verification emails via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from typing import Any

import aiosmtplib

from otp_guard.config import settings
from otp_guard.errors import DeliveryError
from otp_guard.services.templates import render

logger = logging.getLogger(__name__)


class EmailService:
    """Sends transactional emails using the configured SMTP server.

    When no SMTP host is configured the message is written to the log
    instead, so the flow can be exercised locally.
    """

    async def send(
        self,
        to_email: str,
        subject: str,
        template_id: str,
        data: dict[str, Any],
    ) -> None:
        """Render *template_id* with *data* and deliver it to *to_email*.

        Parameters
        ----------
        to_email:
            Recipient email address.
        subject:
            Subject line.
        template_id:
            Key into :data:`otp_guard.services.templates.TEMPLATES`.
        data:
            Template fields (``name`` and ``otp``).

        Raises
        ------
        DeliveryError
            If the SMTP server rejects the message or cannot be reached.
        """
        rendered = render(template_id, data)

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = settings.email_from
        msg["To"] = to_email
        msg.set_content(rendered.text)
        msg.add_alternative(rendered.html, subtype="html")

        if not settings.smtp_configured:
            logger.warning("SMTP not configured — email to %s logged only", to_email)
            if settings.debug:
                logger.info("[EMAIL] %s | %s\n%s", to_email, subject, rendered.text)
            return

        logger.info("Sending %s email to %s", template_id, to_email)
        try:
            await aiosmtplib.send(
                msg,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username or None,
                password=settings.smtp_password or None,
                start_tls=settings.smtp_start_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send %s email to %s: %s", template_id, to_email, exc)
            raise DeliveryError() from exc

        logger.info("Email sent to %s", to_email)
