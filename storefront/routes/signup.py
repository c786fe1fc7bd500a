import uuid
from flask import Blueprint, request, jsonify, current_app
from extensions import per_ip_limit
from models import db
from models.verification import SignupSession
from storefront.auth.accounts import AccountService
from storefront.auth.otp import OtpProvider
from storefront.exceptions import NotFound
from storefront.schemas.auth import SignupCodeRequest, SignupDetailsRequest, SignupPhoneRequest
from storefront.services.signup import SignupFlow
from storefront.utils import ok, transactional, validate_schema
from storefront.version import API_PREFIX


signup_bp = Blueprint("signup", __name__, url_prefix=f"{API_PREFIX}/signup")

_otp_limit = per_ip_limit("OTP_SEND_LIMIT_PER_IP", "Too many OTP requests from this IP")


def _build_flow(state=None):
    cfg = current_app.config
    otp = OtpProvider.from_config(cfg)
    accounts = AccountService.from_config(cfg)
    kwargs = {"min_password_length": cfg["MIN_PASSWORD_LENGTH"]}
    if state is None:
        return SignupFlow(otp, accounts, **kwargs)
    return SignupFlow.restore(state, otp, accounts, **kwargs)


def _load(session_id):
    row = db.session.get(SignupSession, session_id)
    if row is None:
        raise NotFound("Signup session not found")
    return row, _build_flow(row.state)


def _render(row, flow, advanced=True, status=200):
    data = {
        "signup_id": row.id,
        "step": flow.step,
        "phone_number": flow.phone_number,
        "resend_in": flow.remaining_resend_seconds(),
        "error": flow.error,
    }
    if flow.account_uid:
        data["uid"] = flow.account_uid
    if not advanced:
        return jsonify({
            "status": "error",
            "message": flow.error or "Request failed",
            "code": "SIGNUP_STEP_FAILED",
            "data": data,
        }), 400
    return ok(data, status=status)


def _save(row, flow):
    with transactional("Failed to save signup session"):
        row.state = flow.snapshot()


@signup_bp.route("", methods=["POST"])
def start_signup():
    flow = _build_flow()
    row = SignupSession(id=uuid.uuid4().hex, state=flow.snapshot())
    with transactional("Failed to start signup"):
        db.session.add(row)
    return _render(row, flow, status=201)


@signup_bp.route("/<session_id>", methods=["GET"])
def signup_status(session_id):
    row, flow = _load(session_id)
    return _render(row, flow)


@signup_bp.route("/<session_id>/phone", methods=["POST"])
@_otp_limit
@validate_schema(SignupPhoneRequest)
def submit_phone(session_id):
    row, flow = _load(session_id)
    advanced = flow.submit_phone(request.validated_data.phone)
    _save(row, flow)
    return _render(row, flow, advanced)


@signup_bp.route("/<session_id>/verify", methods=["POST"])
@validate_schema(SignupCodeRequest)
def verify_code(session_id):
    row, flow = _load(session_id)
    advanced = flow.submit_code(request.validated_data.code)
    _save(row, flow)
    return _render(row, flow, advanced)


@signup_bp.route("/<session_id>/resend", methods=["POST"])
@_otp_limit
def resend_code(session_id):
    row, flow = _load(session_id)
    advanced = flow.resend()
    _save(row, flow)
    return _render(row, flow, advanced)


@signup_bp.route("/<session_id>/change-number", methods=["POST"])
def change_number(session_id):
    row, flow = _load(session_id)
    flow.change_number()
    _save(row, flow)
    return _render(row, flow)


@signup_bp.route("/<session_id>/details", methods=["POST"])
@validate_schema(SignupDetailsRequest)
def submit_details(session_id):
    data: SignupDetailsRequest = request.validated_data
    row, flow = _load(session_id)
    advanced = flow.submit_details(data.username, data.full_name, data.password, data.email)
    _save(row, flow)
    return _render(row, flow, advanced)
