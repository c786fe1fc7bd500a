"""Account creation and password sign-in.

Accounts are keyed by email. Phone-only signups get a synthetic address
``<country code + number>@<SYNTHETIC_EMAIL_DOMAIN>`` so that a phone number
or username can later be resolved to the email used for sign-in.
"""
import logging
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from models import db
from models.user import Account, UserProfile
from storefront.auth.otp import OtpProvider
from storefront.exceptions import ProviderError
from storefront.metrics import SIGNUPS_COMPLETED
from storefront.schemas.auth import SignupData
from storefront.utils.db import transactional
from storefront.utils.phone import normalize_phone

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def detect_login_type(identifier: str) -> str:
    if "@" in identifier and "." in identifier:
        return "email"
    digits = re.sub(r"\D", "", identifier)
    if len(digits) == 10 or (len(digits) == 12 and digits.startswith("91")):
        return "phone"
    return "username"


class AccountService:
    def __init__(
        self,
        email_domain: str = "temp.candle-craft.com",
        min_password_length: int = 6,
        require_verified_phone: bool = True,
    ):
        self.email_domain = email_domain
        self.min_password_length = min_password_length
        self.require_verified_phone = require_verified_phone

    @classmethod
    def from_config(cls, config, **kwargs) -> "AccountService":
        return cls(
            email_domain=config["SYNTHETIC_EMAIL_DOMAIN"],
            min_password_length=config["MIN_PASSWORD_LENGTH"],
            **kwargs,
        )

    def synthesize_email(self, phone_number: str) -> str:
        return f"{phone_number.replace('+', '')}@{self.email_domain}"

    def create_account(self, data: SignupData) -> UserProfile:
        try:
            phone = normalize_phone(data.phone_number)
        except ValueError:
            raise ProviderError("auth/invalid-phone-number")
        email = (data.email or "").strip().lower()
        if email and not EMAIL_PATTERN.match(email):
            raise ProviderError("auth/invalid-email")
        if len(data.password) < self.min_password_length:
            raise ProviderError("auth/weak-password")
        if self.require_verified_phone and not OtpProvider.is_verified(phone):
            raise ProviderError("auth/phone-not-verified")

        login_email = email or self.synthesize_email(phone)
        if Account.query.filter_by(email=login_email).first():
            raise ProviderError("auth/email-already-in-use")
        if UserProfile.query.filter_by(username=data.username).first():
            raise ProviderError("auth/username-taken")
        if UserProfile.query.filter_by(phone_number=phone).first():
            raise ProviderError("auth/phone-already-in-use")

        account = Account(email=login_email, password_hash=generate_password_hash(data.password))
        try:
            with transactional("Failed to create account"):
                db.session.add(account)
                db.session.flush()
                profile = UserProfile(
                    uid=account.uid,
                    email=email,
                    username=data.username,
                    full_name=data.full_name,
                    phone_number=phone,
                    phone_verified=True,
                    email_verified=bool(email),
                    role="user",
                )
                db.session.add(profile)
        except IntegrityError:
            raise ProviderError("auth/email-already-in-use")

        SIGNUPS_COMPLETED.inc()
        logger.info("Account created uid=%s", account.uid)
        return profile

    def find_profile(self, identifier: str, login_type: str) -> Optional[UserProfile]:
        if login_type == "email":
            return UserProfile.query.filter_by(email=identifier.strip().lower()).first()
        if login_type == "phone":
            try:
                phone = normalize_phone(identifier)
            except ValueError:
                return None
            return UserProfile.query.filter_by(phone_number=phone).first()
        if login_type == "username":
            return UserProfile.query.filter_by(username=identifier.strip()).first()
        return None

    def sign_in(self, identifier: str, password: str) -> UserProfile:
        login_type = detect_login_type(identifier)
        if login_type == "email":
            account = Account.query.filter_by(email=identifier.strip().lower()).first()
        else:
            profile = self.find_profile(identifier, login_type)
            if profile is None:
                raise ProviderError("auth/user-not-found", f"No account found with this {login_type}.")
            account = db.session.get(Account, profile.uid)

        if account is None:
            raise ProviderError("auth/user-not-found")
        if account.disabled:
            raise ProviderError("auth/user-disabled")
        if not check_password_hash(account.password_hash, password):
            raise ProviderError("auth/wrong-password")

        profile = db.session.get(UserProfile, account.uid)
        if profile is None:
            raise ProviderError("auth/user-not-found")
        return profile
