from .responses import ok, error, validation_error_response
from .auth import auth_required, role_required, current_identity
from .validation import validate_schema
from .db import transactional
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    issue_tokens,
    TokenError,
)
from .phone import normalize_phone, is_valid_mobile

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'auth_required',
    'role_required',
    'current_identity',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'issue_tokens',
    'TokenError',
    'validate_schema',
    'transactional',
    'normalize_phone',
    'is_valid_mobile',
]
