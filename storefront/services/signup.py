"""Phone-first signup as a small step machine.

    phone-input -> phone-verify -> personal-details -> completed

The only backward move is ``change_number`` from ``phone-verify``. A failed
submission keeps the current step and leaves a user-facing message in
``error``; the caller decides whether to resubmit.
"""
import logging
import math
import re
from datetime import datetime
from typing import Callable, Optional

from storefront.auth.messages import GENERIC_MESSAGE
from storefront.exceptions import InvalidTransition, ProviderError, ValidationFailed
from storefront.schemas.auth import SignupData
from storefront.utils.phone import is_valid_mobile, normalize_phone

logger = logging.getLogger(__name__)

PHONE_INPUT = "phone-input"
PHONE_VERIFY = "phone-verify"
PERSONAL_DETAILS = "personal-details"
COMPLETED = "completed"

STEPS = (PHONE_INPUT, PHONE_VERIFY, PERSONAL_DETAILS, COMPLETED)

CODE_PATTERN = re.compile(r"^\d{6}$")


class SignupFlow:
    def __init__(
        self,
        otp,
        accounts,
        clock: Callable[[], datetime] = datetime.utcnow,
        min_password_length: int = 6,
    ):
        self._otp = otp
        self._accounts = accounts
        self._clock = clock
        self.min_password_length = min_password_length

        self.step = PHONE_INPUT
        self.phone_number: Optional[str] = None
        self.confirmation_handle: Optional[str] = None
        self.can_resend_at: Optional[datetime] = None
        self.account_uid: Optional[str] = None
        self.error: Optional[str] = None

    # --- helpers ---

    def _require(self, step: str, action: str) -> None:
        if self.step != step:
            raise InvalidTransition(f"Cannot {action} while at step {self.step}")

    def _call(self, fn, *args):
        """Run a provider call, turning its failures into ``self.error``."""
        try:
            result = fn(*args)
        except (ProviderError, ValidationFailed) as e:
            self.error = e.message
            logger.info("Signup step %s failed: %s", self.step, e.code)
            return False, None
        except Exception:
            logger.exception("Signup step %s failed unexpectedly", self.step)
            self.error = GENERIC_MESSAGE
            return False, None
        self.error = None
        return True, result

    def remaining_resend_seconds(self, now: Optional[datetime] = None) -> int:
        if self.can_resend_at is None:
            return 0
        now = now or self._clock()
        return max(0, math.ceil((self.can_resend_at - now).total_seconds()))

    # --- transitions ---

    def submit_phone(self, phone: str) -> bool:
        self._require(PHONE_INPUT, "submit a phone number")
        if not phone or not is_valid_mobile(phone):
            self.error = "Please enter a valid 10-digit mobile number"
            return False

        formatted = normalize_phone(phone)
        ok, sent = self._call(self._otp.send_code, formatted)
        if not ok:
            return False
        self.phone_number = formatted
        self.confirmation_handle = sent.confirmation_handle
        self.can_resend_at = sent.can_resend_at
        self.step = PHONE_VERIFY
        return True

    def submit_code(self, code: str) -> bool:
        self._require(PHONE_VERIFY, "verify a code")
        code = (code or "").strip()
        if not CODE_PATTERN.match(code):
            self.error = "Please enter the 6-digit verification code"
            return False

        ok, _ = self._call(self._otp.confirm_code, self.confirmation_handle, code)
        if not ok:
            return False
        self.step = PERSONAL_DETAILS
        return True

    def resend(self) -> bool:
        self._require(PHONE_VERIFY, "resend a code")
        wait = self.remaining_resend_seconds()
        if wait > 0:
            self.error = f"Please wait {wait} seconds before requesting another OTP."
            return False

        ok, sent = self._call(self._otp.send_code, self.phone_number)
        if not ok:
            return False
        self.confirmation_handle = sent.confirmation_handle
        self.can_resend_at = sent.can_resend_at
        return True

    def change_number(self) -> None:
        self._require(PHONE_VERIFY, "change the mobile number")
        self.step = PHONE_INPUT
        self.confirmation_handle = None
        self.can_resend_at = None
        self.error = None

    def submit_details(self, username: str, full_name: str, password: str, email: Optional[str] = None) -> bool:
        self._require(PERSONAL_DETAILS, "submit personal details")
        if not username or not full_name or not password:
            self.error = "Please fill in all required fields"
            return False
        if len(password) < self.min_password_length:
            self.error = f"Password must be at least {self.min_password_length} characters long"
            return False

        data = SignupData(
            phone_number=self.phone_number,
            email=email or None,
            username=username,
            full_name=full_name,
            password=password,
        )
        ok, profile = self._call(self._accounts.create_account, data)
        if not ok:
            return False
        self.account_uid = profile.uid
        self.step = COMPLETED
        return True

    # --- persistence between requests ---

    def snapshot(self) -> dict:
        return {
            "step": self.step,
            "phone_number": self.phone_number,
            "confirmation_handle": self.confirmation_handle,
            "can_resend_at": self.can_resend_at.isoformat() if self.can_resend_at else None,
            "account_uid": self.account_uid,
            "error": self.error,
        }

    @classmethod
    def restore(cls, state: dict, otp, accounts, **kwargs) -> "SignupFlow":
        flow = cls(otp, accounts, **kwargs)
        step = state.get("step", PHONE_INPUT)
        flow.step = step if step in STEPS else PHONE_INPUT
        flow.phone_number = state.get("phone_number")
        flow.confirmation_handle = state.get("confirmation_handle")
        resend_at = state.get("can_resend_at")
        flow.can_resend_at = datetime.fromisoformat(resend_at) if resend_at else None
        flow.account_uid = state.get("account_uid")
        flow.error = state.get("error")
        return flow
