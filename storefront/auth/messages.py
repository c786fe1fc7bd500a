"""User-facing text for auth and phone-verification provider codes."""

GENERIC_MESSAGE = "Something went wrong. Please check your internet connection and try again."

PROVIDER_MESSAGES = {
    # phone verification
    "auth/invalid-phone-number": "Invalid phone number format. Please enter a valid Indian mobile number.",
    "auth/missing-phone-number": "Phone number is required.",
    "auth/too-many-requests": "Too many attempts. Please try again after some time.",
    "auth/quota-exceeded": "Daily SMS quota exceeded. Please try again tomorrow.",
    "auth/invalid-verification-code": "Invalid verification code. Please check and try again.",
    "auth/code-expired": "Verification code has expired. Please request a new code.",
    "auth/session-expired": "Verification session has expired. Please request a new code.",
    "auth/phone-not-verified": "Please verify your mobile number before creating an account.",
    "auth/operation-not-allowed": "Phone authentication is not enabled. Please contact support.",
    "auth/sms-delivery-failed": "We could not send the verification code. Please try again in a moment.",
    # account creation
    "auth/email-already-in-use": "An account with this email already exists.",
    "auth/username-taken": "This username is already taken.",
    "auth/phone-already-in-use": "An account with this mobile number already exists.",
    "auth/weak-password": "Password is too weak. Please choose a stronger password.",
    "auth/invalid-email": "Invalid email address.",
    # sign in
    "auth/user-not-found": "No account found with these credentials.",
    "auth/wrong-password": "Incorrect password.",
    "auth/user-disabled": "This account has been disabled.",
}


def describe(code: str) -> str:
    return PROVIDER_MESSAGES.get(code, GENERIC_MESSAGE)
