from functools import wraps
from typing import Optional
from flask import request, g
from .responses import error
from storefront.exceptions import Forbidden
from storefront.auth.permissions import role_has_scope
from .jwt import decode_token, TokenError
from models import db
from models.user import UserProfile


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    return auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth


def current_identity() -> Optional[str]:
    """Return the signed-in uid, or None for anonymous or invalid tokens."""
    token = _bearer_token()
    if not token:
        return None
    try:
        payload = decode_token(token, expected_type="access")
    except TokenError:
        return None
    return payload.get("sub")


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return error("Auth header missing", status=401)
        try:
            payload = decode_token(token, expected_type="access")
        except TokenError as e:
            return error(str(e), status=401)

        g.uid = payload["sub"]
        g.role = payload.get("role")
        g.user = db.session.get(UserProfile, g.uid)
        if g.user is None:
            return error("Account not found", status=401)
        return func(*args, **kwargs)

    return wrapper


def _to_set(obj):
    return set(obj) if isinstance(obj, (list, tuple, set)) else {obj}


def role_required(required):
    """Authorize based on user role or scoped action."""
    required_set = _to_set(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = getattr(g, "role", None)
            db_role = getattr(getattr(g, "user", None), "role", None)
            if db_role:
                role = db_role
            if not role:
                return error("Role missing", status=403)
            for entry in required_set:
                if ":" in entry:
                    r, action = entry.split(":", 1)
                    if role == r and role_has_scope(role, action):
                        break
                else:
                    if role == entry:
                        break
            else:
                raise Forbidden("Forbidden")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
