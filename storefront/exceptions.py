"""Domain errors raised by storefront services.

Each error carries the HTTP status and the machine readable ``code`` the
errors blueprint puts in the response envelope, so services never build
responses themselves.
"""
from storefront.auth.messages import describe


class StorefrontError(Exception):
    status = 400
    code = "BAD_REQUEST"

    def __init__(self, message=None, code=None, status=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status


class ValidationFailed(StorefrontError):
    """Local input check failed; nothing was sent to a provider."""
    code = "VALIDATION_ERROR"


class EmptyCart(ValidationFailed):
    code = "EMPTY_CART"


class ProviderError(StorefrontError):
    """Auth or OTP provider rejected a call with a provider ``code``."""

    def __init__(self, code, message=None):
        super().__init__(message or describe(code), code=code)


class AuthenticationRequired(StorefrontError):
    status = 401
    code = "AUTHENTICATION_REQUIRED"


class Forbidden(StorefrontError):
    status = 403
    code = "FORBIDDEN"


class NotFound(StorefrontError):
    status = 404
    code = "NOT_FOUND"


class AddressNotFound(NotFound):
    code = "ADDRESS_NOT_FOUND"


class InvalidTransition(StorefrontError):
    status = 409
    code = "INVALID_TRANSITION"
