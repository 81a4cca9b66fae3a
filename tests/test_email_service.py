"""Tests for the EmailService and its templates."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from otp_guard.config import settings
from otp_guard.errors import DeliveryError
from otp_guard.services.email_service import EmailService
from otp_guard.services.templates import TEMPLATES, UnknownTemplateError, render


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_port", 2525)
    monkeypatch.setattr(settings, "smtp_username", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "secret")
    monkeypatch.setattr(settings, "email_from", "no-reply@shop.test")


# ── Templates ────────────────────────────────────────────

@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_every_template_renders_name_and_code(template_id):
    mail = render(template_id, {"name": "Alice", "otp": "4821"})

    assert "Alice" in mail.text and "4821" in mail.text
    assert "Alice" in mail.html and "4821" in mail.html


def test_unknown_template():
    with pytest.raises(UnknownTemplateError):
        render("welcome-mail", {"name": "Alice", "otp": "4821"})


# ── Delivery ─────────────────────────────────────────────

@pytest.mark.asyncio
async def test_send_uses_smtp(smtp_settings):
    with patch("otp_guard.services.email_service.aiosmtplib.send", new=AsyncMock()) as send:
        await EmailService().send(
            "alice@example.com", "Verify Your Email", "user-activation-mail",
            {"name": "Alice", "otp": "4821"},
        )

    send.assert_awaited_once()
    msg = send.call_args.args[0]
    assert msg["To"] == "alice@example.com"
    assert msg["From"] == "no-reply@shop.test"
    assert msg["Subject"] == "Verify Your Email"
    assert "4821" in msg.get_body(preferencelist=("plain",)).get_content()
    assert send.call_args.kwargs["hostname"] == "smtp.example.com"
    assert send.call_args.kwargs["port"] == 2525
    assert send.call_args.kwargs["username"] == "mailer"


@pytest.mark.asyncio
async def test_smtp_failure_raises_delivery_error(smtp_settings):
    failing = AsyncMock(side_effect=aiosmtplib.SMTPConnectError("connection refused"))
    with patch("otp_guard.services.email_service.aiosmtplib.send", new=failing):
        with pytest.raises(DeliveryError):
            await EmailService().send(
                "alice@example.com", "Verify Your Email", "user-activation-mail",
                {"name": "Alice", "otp": "4821"},
            )


@pytest.mark.asyncio
async def test_unconfigured_smtp_logs_instead(monkeypatch, caplog):
    monkeypatch.setattr(settings, "smtp_host", "")
    monkeypatch.setattr(settings, "debug", False)

    with patch("otp_guard.services.email_service.aiosmtplib.send", new=AsyncMock()) as send:
        with caplog.at_level(logging.INFO, logger="otp_guard.services.email_service"):
            await EmailService().send(
                "alice@example.com", "Verify Your Email", "user-activation-mail",
                {"name": "Alice", "otp": "4821"},
            )

    send.assert_not_called()
    assert "alice@example.com" in caplog.text
    assert "4821" not in caplog.text
