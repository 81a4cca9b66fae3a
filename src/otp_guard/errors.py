"""Application errors — typed, user-facing failures with an HTTP status.

Services raise these; the FastAPI exception handlers in
:mod:`otp_guard.main` turn them into JSON responses.  Anything that is
*not* an ``AppError`` (e.g. a Redis outage) is treated as unexpected and
reaches the generic 500 handler unchanged.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for operational errors surfaced to API callers."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_operational: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational
        self.details = details


class ValidationError(AppError):
    """Request rejected because of its data or the caller's current state."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)


class DeliveryError(AppError):
    """The verification email could not be handed to the mail server."""

    def __init__(self, message: str = "Failed to send verification email") -> None:
        super().__init__(message)


# ── Issuance gates ───────────────────────────────────────

class OtpLockedError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "Account locked due to multiple failed attempts! Try again after 30 minutes"
        )


class OtpSpamLockedError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Too many OTP requests! Try again after 1 hour")


class OtpCooldownError(ValidationError):
    def __init__(self) -> None:
        super().__init__("You have already requested an OTP! Try again after 1 minute")


class OtpSpamThresholdError(ValidationError):
    """Raised when a request newly engages the spam lock."""

    def __init__(self) -> None:
        super().__init__("Too many OTP requests! Try again after 1 hour")


# ── Verification ─────────────────────────────────────────

class OtpExpiredError(ValidationError):
    def __init__(self) -> None:
        super().__init__("OTP expired! Please request a new one")


class OtpIncorrectError(ValidationError):
    def __init__(self, attempts_left: int) -> None:
        super().__init__(
            f"Incorrect OTP! Attempts left: {attempts_left}",
            details={"attempts_left": attempts_left},
        )
        self.attempts_left = attempts_left


class OtpAttemptsExhaustedError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Too many failed attempts! Account locked for 30 minutes")
