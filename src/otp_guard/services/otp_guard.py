"""OTP guard — throttled issuance and attempt-limited verification of email OTPs.

Flow
----
1. ``check_restriction`` refuses while a lockout, spam lock or cooldown
   flag is live for the identity.
2. ``track_request`` counts requests in a sliding one-hour window and
   engages the spam lock on the third.
3. ``issue_otp`` mails a fresh 4-digit code, then stores it with a short
   cooldown.
4. ``verify_otp`` consumes the code on a match; the third wrong guess
   locks the identity for 30 minutes and discards the code.

All state lives in Redis (see :class:`OtpStateRepository`), so any number
of handlers may serve the same identity concurrently.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Protocol

from otp_guard.errors import (
    OtpAttemptsExhaustedError,
    OtpCooldownError,
    OtpExpiredError,
    OtpIncorrectError,
    OtpLockedError,
    OtpSpamLockedError,
    OtpSpamThresholdError,
)
from otp_guard.store.repository import OtpKey, OtpStateRepository

logger = logging.getLogger(__name__)

# ── Policy ───────────────────────────────────────────────
OTP_TTL_SECONDS = 300
COOLDOWN_SECONDS = 60
REQUEST_WINDOW_SECONDS = 3600
SPAM_LOCK_SECONDS = 3600
ATTEMPTS_TTL_SECONDS = 300
LOCK_SECONDS = 1800

MAX_REQUESTS_PER_WINDOW = 2
MAX_FAILED_ATTEMPTS = 3

OTP_SUBJECT = "Verify Your Email"


class MailSender(Protocol):
    async def send(
        self, to_email: str, subject: str, template_id: str, data: dict[str, Any]
    ) -> None: ...


@dataclass
class OtpStatus:
    """Read-only snapshot of one identity's OTP state."""

    identity: str
    has_code: bool
    failed_attempts: int
    request_count: int
    locked: bool
    spam_locked: bool
    cooling_down: bool
    lock_ttl: int | None = None


def generate_otp() -> str:
    """Return a 4-digit code drawn uniformly from 1000–9999."""
    return str(secrets.randbelow(9000) + 1000)


class OtpGuard:
    """Coordinates OTP issuance and verification for email identities."""

    def __init__(self, repository: OtpStateRepository, mail_sender: MailSender) -> None:
        self._repo = repository
        self._mail = mail_sender

    # ── Issuance ─────────────────────────────────────────

    async def check_restriction(self, identity: str) -> None:
        """Raise if any lock or cooldown currently blocks a new OTP."""
        if await self._repo.has_flag(OtpKey.LOCK, identity):
            raise OtpLockedError()
        if await self._repo.has_flag(OtpKey.SPAM_LOCK, identity):
            raise OtpSpamLockedError()
        if await self._repo.has_flag(OtpKey.COOLDOWN, identity):
            raise OtpCooldownError()

    async def track_request(self, identity: str) -> None:
        """Count this request; engage the spam lock once the window is full."""
        count = await self._repo.increment_counter(
            OtpKey.REQUEST_COUNT, identity, REQUEST_WINDOW_SECONDS
        )
        if count > MAX_REQUESTS_PER_WINDOW:
            await self._repo.set_flag(OtpKey.SPAM_LOCK, identity, SPAM_LOCK_SECONDS)
            logger.warning("Spam lock engaged for %s after %d requests", identity, count)
            raise OtpSpamThresholdError()

    async def issue_otp(self, display_name: str, identity: str, template_id: str) -> None:
        """Mail a new code to *identity* and remember it.

        Gating is the caller's job.  If delivery fails the
        ``DeliveryError`` propagates and nothing is stored.
        """
        code = generate_otp()
        await self._mail.send(
            identity, OTP_SUBJECT, template_id, {"name": display_name, "otp": code}
        )
        await self._repo.save_code(identity, code, OTP_TTL_SECONDS)
        await self._repo.set_flag(OtpKey.COOLDOWN, identity, COOLDOWN_SECONDS)
        logger.info("OTP issued to %s using %s", identity, template_id)

    async def request_otp(self, display_name: str, identity: str, template_id: str) -> None:
        """Check, track and issue in one call, stopping at the first refusal."""
        await self.check_restriction(identity)
        await self.track_request(identity)
        await self.issue_otp(display_name, identity, template_id)

    # ── Verification ─────────────────────────────────────

    async def verify_otp(self, identity: str, submitted: str) -> None:
        """Consume the stored code if *submitted* matches it.

        Raises
        ------
        OtpExpiredError
            No code is live for *identity*.
        OtpIncorrectError
            Wrong code; ``attempts_left`` says how many guesses remain.
        OtpAttemptsExhaustedError
            Third wrong code; the identity is locked and the code dropped.
        """
        stored = await self._repo.get_code(identity)
        if stored is None:
            raise OtpExpiredError()

        if submitted == stored:
            await self._repo.clear_code(identity)
            logger.info("OTP verified for %s", identity)
            return

        failures = await self._repo.increment_counter(
            OtpKey.ATTEMPTS, identity, ATTEMPTS_TTL_SECONDS
        )
        if failures >= MAX_FAILED_ATTEMPTS:
            await self._repo.set_flag(OtpKey.LOCK, identity, LOCK_SECONDS)
            await self._repo.clear_code(identity)
            logger.warning("Identity %s locked after %d failed OTP attempts", identity, failures)
            raise OtpAttemptsExhaustedError()

        logger.info("Incorrect OTP for %s (%d/%d)", identity, failures, MAX_FAILED_ATTEMPTS)
        raise OtpIncorrectError(attempts_left=MAX_FAILED_ATTEMPTS - failures)

    # ── Introspection ────────────────────────────────────

    async def inspect(self, identity: str) -> OtpStatus:
        """Snapshot every OTP key for *identity* without changing any."""
        locked = await self._repo.has_flag(OtpKey.LOCK, identity)
        return OtpStatus(
            identity=identity,
            has_code=await self._repo.get_code(identity) is not None,
            failed_attempts=await self._repo.get_counter(OtpKey.ATTEMPTS, identity) or 0,
            request_count=await self._repo.get_counter(OtpKey.REQUEST_COUNT, identity) or 0,
            locked=locked,
            spam_locked=await self._repo.has_flag(OtpKey.SPAM_LOCK, identity),
            cooling_down=await self._repo.has_flag(OtpKey.COOLDOWN, identity),
            lock_ttl=await self._repo.ttl(OtpKey.LOCK, identity) if locked else None,
        )
