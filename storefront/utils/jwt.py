"""Access and refresh tokens for storefront accounts.

Both token types are HS256 JWTs whose subject is the account uid. Every
token names the shop as issuer; tokens from another issuer are rejected.
"""
import datetime as dt
import uuid
from typing import Dict

import jwt
from flask import current_app

ALGORITHM = "HS256"


class TokenError(Exception):
    pass


def _encode(uid: str, token_type: str, lifetime: dt.timedelta, **claims) -> str:
    cfg = current_app.config
    now = dt.datetime.now(dt.timezone.utc)
    payload: Dict = {
        "sub": uid,
        "type": token_type,
        "iss": cfg["JWT_ISSUER"],
        "iat": now,
        "exp": now + lifetime,
        "jti": uuid.uuid4().hex,
        **claims,
    }
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=ALGORITHM)


def create_access_token(uid: str, role: str) -> str:
    minutes = current_app.config["ACCESS_TOKEN_LIFETIME_MIN"]
    return _encode(uid, "access", dt.timedelta(minutes=minutes), role=role)


def create_refresh_token(uid: str) -> str:
    days = current_app.config["REFRESH_TOKEN_LIFETIME_DAYS"]
    return _encode(uid, "refresh", dt.timedelta(days=days))


def issue_tokens(uid: str, role: str) -> Dict:
    return {
        "access_token": create_access_token(uid, role or "user"),
        "refresh_token": create_refresh_token(uid),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }


def decode_token(token: str, expected_type: str = "access") -> Dict:
    cfg = current_app.config
    try:
        data = jwt.decode(
            token,
            cfg["JWT_SECRET"],
            algorithms=[ALGORITHM],
            issuer=cfg["JWT_ISSUER"],
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    return data
