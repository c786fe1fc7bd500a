from flask import Blueprint, request, jsonify, current_app, g
from extensions import per_ip_limit
from models import db
from models.user import UserProfile
from storefront.auth.accounts import AccountService
from storefront.schemas.auth import LoginRequest, RefreshRequest
from storefront.utils import (
    auth_required,
    decode_token,
    error,
    issue_tokens,
    ok,
    validate_schema,
    TokenError,
)
from storefront.version import API_PREFIX


auth_bp = Blueprint("auth", __name__, url_prefix=API_PREFIX)


@auth_bp.route("/auth/login", methods=["POST"])
@per_ip_limit("LOGIN_LIMIT_PER_IP", "Too many logins from this IP")
@validate_schema(LoginRequest)
def login_handler():
    data: LoginRequest = request.validated_data
    profile = AccountService.from_config(current_app.config).sign_in(data.identifier, data.password)
    current_app.logger.info("Signed in uid=%s", profile.uid)
    payload = issue_tokens(profile.uid, profile.role)
    payload["user"] = profile.to_dict()
    return ok(payload, message="Logged in")


# --- Logout handler ---
@auth_bp.route("/logout", methods=["POST"])
def logout_handler():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return error("Token missing", status=401)
    token = auth.split(" ", 1)[1]
    try:
        decode_token(token)
    except TokenError as e:
        return error(str(e), status=401)
    return jsonify({"status": "success", "message": "Logged out"}), 200


@auth_bp.route("/auth/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    data: RefreshRequest = request.validated_data
    try:
        payload = decode_token(data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    profile = db.session.get(UserProfile, payload.get("sub"))
    if profile is None:
        return error("Account not found", status=401)
    return jsonify(issue_tokens(profile.uid, profile.role)), 200


@auth_bp.route("/auth/me", methods=["GET"])
@auth_required
def current_user():
    return ok({"user": g.user.to_dict()})
