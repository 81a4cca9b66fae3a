"""OTP API router — registration and password-reset verification codes.

Endpoints
---------
POST /api/otp/request   → gate, count and mail a new code
POST /api/otp/verify    → check a submitted code
"""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from otp_guard.services.email_service import EmailService
from otp_guard.services.otp_guard import OtpGuard
from otp_guard.store.engine import redis_client
from otp_guard.store.repository import OtpStateRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/otp", tags=["otp"])

# Shared guard (created once, reused across requests)
_otp_guard = OtpGuard(OtpStateRepository(redis_client), EmailService())


def get_otp_guard() -> OtpGuard:
    return _otp_guard


class OtpPurpose(str, Enum):
    USER_ACTIVATION = "user-activation"
    SELLER_ACTIVATION = "seller-activation"
    FORGOT_PASSWORD_USER = "forgot-password-user"
    FORGOT_PASSWORD_SELLER = "forgot-password-seller"

    @property
    def template_id(self) -> str:
        return f"{self.value}-mail"


# ── Request / response models ────────────────────────────

class OTPRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    email: EmailStr
    purpose: OtpPurpose = OtpPurpose.USER_ACTIVATION


class OTPVerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=16)


class OTPResponse(BaseModel):
    success: bool
    message: str


# ── Endpoints ────────────────────────────────────────────

@router.post("/request", response_model=OTPResponse)
async def request_otp(body: OTPRequest, guard: OtpGuard = Depends(get_otp_guard)):
    """Send a verification code for the given purpose."""
    await guard.request_otp(body.name, body.email, body.purpose.template_id)
    logger.info("OTP requested for %s (%s)", body.email, body.purpose.value)
    return OTPResponse(success=True, message="OTP sent successfully to your email")


@router.post("/verify", response_model=OTPResponse)
async def verify_otp(body: OTPVerifyRequest, guard: OtpGuard = Depends(get_otp_guard)):
    """Validate a code previously sent to the email address."""
    await guard.verify_otp(body.email, body.otp)
    return OTPResponse(success=True, message="OTP verified successfully")
