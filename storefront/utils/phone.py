import re

MOBILE_PATTERN = re.compile(r"^[6-9]\d{9}$")


def _digits(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def is_valid_mobile(phone: str) -> bool:
    """True for a 10-digit Indian mobile number starting with 6-9."""
    return bool(MOBILE_PATTERN.match(_digits(phone)))


def normalize_phone(phone: str) -> str:
    """Normalize a phone number to +91XXXXXXXXXX format.

    Non-digit characters are stripped and a leading 91 country code is
    accepted. Raises ValueError if what remains is not 10 digits.
    """
    digits = _digits(phone)
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    if len(digits) != 10:
        raise ValueError("phone must be 10 digits")
    return f"+91{digits}"


__all__ = ["normalize_phone", "is_valid_mobile"]
