"""Email templates for OTP delivery, addressed by template ID."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from otp_guard.config import settings


class UnknownTemplateError(KeyError):
    """No template is registered under the requested ID."""


@dataclass(frozen=True)
class MailTemplate:
    heading: str
    intro: str


@dataclass
class RenderedMail:
    text: str
    html: str


TEMPLATES: dict[str, MailTemplate] = {
    "user-activation-mail": MailTemplate(
        heading="Activate your account",
        intro="Thanks for signing up! Use the code below to verify your email address.",
    ),
    "seller-activation-mail": MailTemplate(
        heading="Activate your seller account",
        intro=(
            "Thanks for registering as a seller! Use the code below to verify "
            "your email address and continue setting up your shop."
        ),
    ),
    "forgot-password-user-mail": MailTemplate(
        heading="Reset your password",
        intro="We received a request to reset your password. Use the code below to continue.",
    ),
    "forgot-password-seller-mail": MailTemplate(
        heading="Reset your seller password",
        intro=(
            "We received a request to reset the password of your seller account. "
            "Use the code below to continue."
        ),
    ),
}

_TEXT_BODY = (
    "Hello {name},\n\n"
    "{intro}\n\n"
    "    {otp}\n\n"
    "This code expires in 5 minutes. If you did not request it, you can "
    "safely ignore this email.\n\n"
    "Best regards,\n"
    "The {app_name} Team"
)

_HTML_BODY = """\
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
  <h2>{heading}</h2>
  <p>Hello {name},</p>
  <p>{intro}</p>
  <p style="font-size: 32px; font-weight: bold; letter-spacing: 8px;">{otp}</p>
  <p style="color: #666;">This code expires in 5 minutes.
     If you did not request it, you can safely ignore this email.</p>
  <p>The {app_name} Team</p>
</body>
</html>
"""


def render(template_id: str, data: dict[str, Any]) -> RenderedMail:
    """Fill the template registered as *template_id* with *data*.

    *data* must provide ``name`` and ``otp``.
    """
    try:
        template = TEMPLATES[template_id]
    except KeyError:
        raise UnknownTemplateError(template_id) from None

    fields = {
        "heading": template.heading,
        "intro": template.intro,
        "name": data["name"],
        "otp": data["otp"],
        "app_name": settings.app_name,
    }
    return RenderedMail(text=_TEXT_BODY.format(**fields), html=_HTML_BODY.format(**fields))
