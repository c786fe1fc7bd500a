"""Phone verification: issues six digit codes and confirms them.

A code is stored as a ``PhoneVerification`` row whose primary key is the
opaque confirmation handle given back to the caller. Sending a new code
invalidates every pending row of the same phone.
"""
import logging
import math
import random
import re
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from pydantic import BaseModel

from models import db
from models.verification import PhoneVerification
from storefront.exceptions import ProviderError
from storefront.metrics import OTP_SENT
from storefront.tasks.notifications import dispatch_sms
from storefront.utils.db import transactional

logger = logging.getLogger(__name__)

FORMATTED_PHONE = re.compile(r"^\+91[6-9]\d{9}$")


class OtpSent(BaseModel):
    confirmation_handle: str
    can_resend_at: datetime


def generate_otp():
    return str(random.randint(100000, 999999))


class OtpProvider:
    def __init__(
        self,
        cooldown_seconds: int = 120,
        expiry_minutes: int = 10,
        max_attempts: int = 5,
        daily_quota: int = 10,
        deliver: Callable[[str, str], None] = dispatch_sms,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.cooldown_seconds = cooldown_seconds
        self.expiry_minutes = expiry_minutes
        self.max_attempts = max_attempts
        self.daily_quota = daily_quota
        self._deliver = deliver
        self._clock = clock

    @classmethod
    def from_config(cls, config, **kwargs) -> "OtpProvider":
        return cls(
            cooldown_seconds=config["OTP_RESEND_COOLDOWN_SEC"],
            expiry_minutes=config["OTP_EXPIRY_MIN"],
            max_attempts=config["OTP_MAX_ATTEMPTS"],
            daily_quota=config["OTP_DAILY_QUOTA"],
            **kwargs,
        )

    def _latest(self, phone: str) -> Optional[PhoneVerification]:
        return (
            PhoneVerification.query.filter_by(phone=phone)
            .order_by(PhoneVerification.sent_at.desc())
            .first()
        )

    def can_resend(self, phone: str) -> Tuple[bool, int]:
        """Return (allowed, seconds to wait) for another code to ``phone``."""
        latest = self._latest(phone)
        if latest is None:
            return True, 0
        elapsed = (self._clock() - latest.sent_at).total_seconds()
        if elapsed >= self.cooldown_seconds:
            return True, 0
        return False, math.ceil(self.cooldown_seconds - elapsed)

    def send_code(self, phone: str) -> OtpSent:
        if not phone:
            raise ProviderError("auth/missing-phone-number")
        if not FORMATTED_PHONE.match(phone):
            raise ProviderError("auth/invalid-phone-number")

        allowed, wait = self.can_resend(phone)
        if not allowed:
            raise ProviderError(
                "auth/too-many-requests",
                f"Please wait {wait} seconds before requesting another OTP.",
            )

        now = self._clock()
        sent_today = PhoneVerification.query.filter(
            PhoneVerification.phone == phone,
            PhoneVerification.sent_at >= now - timedelta(days=1),
        ).count()
        if sent_today >= self.daily_quota:
            raise ProviderError("auth/quota-exceeded")

        code = generate_otp()
        record = PhoneVerification(
            id=uuid.uuid4().hex,
            phone=phone,
            code=code,
            sent_at=now,
            attempts=0,
            status="pending",
        )
        superseded = PhoneVerification.query.filter_by(phone=phone, status="pending").all()
        with transactional("Failed to create phone verification"):
            for old in superseded:
                old.status = "invalidated"
            db.session.add(record)

        try:
            self._deliver(phone, f"Your Candle Craft verification code is {code}")
        except Exception:
            logger.exception("SMS delivery failed for handle %s", record.id)
            self._withdraw(record, superseded)
            raise ProviderError("auth/sms-delivery-failed")
        OTP_SENT.inc()
        logger.debug({"event": "otp_sent", "phone": phone, "code": code})
        return OtpSent(
            confirmation_handle=record.id,
            can_resend_at=now + timedelta(seconds=self.cooldown_seconds),
        )

    def _withdraw(self, record: PhoneVerification, superseded) -> None:
        """Undo an undelivered send so it costs neither cooldown nor quota."""
        with transactional("Failed to withdraw phone verification"):
            db.session.delete(record)
            for old in superseded:
                old.status = "pending"

    def confirm_code(self, confirmation_handle: str, code: str) -> str:
        """Check ``code`` against the handle; return the verified phone."""
        record = db.session.get(PhoneVerification, confirmation_handle) if confirmation_handle else None
        if record is None or record.status != "pending":
            raise ProviderError("auth/session-expired")
        if self._clock() - record.sent_at > timedelta(minutes=self.expiry_minutes):
            raise ProviderError("auth/code-expired")
        if record.attempts >= self.max_attempts:
            raise ProviderError("auth/too-many-requests")

        if (code or "").strip() != record.code:
            with transactional("Failed to record verification attempt"):
                record.attempts += 1
            logger.warning("Verification code mismatch for handle %s (attempt %s)", record.id, record.attempts)
            raise ProviderError("auth/invalid-verification-code")

        with transactional("Failed to verify phone"):
            record.status = "verified"
        logger.info("Phone verified for handle %s", record.id)
        return record.phone

    @staticmethod
    def is_verified(phone: str) -> bool:
        return (
            PhoneVerification.query.filter_by(phone=phone, status="verified").first()
            is not None
        )
