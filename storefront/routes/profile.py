from flask import Blueprint, request, g
from models import db
from models.order import Order
from models.user import Address, UserProfile
from storefront.exceptions import NotFound, ProviderError
from storefront.schemas.profile import AddressRequest, ProfileUpdateRequest
from storefront.utils import auth_required, role_required, ok, transactional, validate_schema
from storefront.version import API_PREFIX

profile_bp = Blueprint("profile", __name__, url_prefix=f"{API_PREFIX}/profile")


@profile_bp.before_request
@auth_required
@role_required(["user:manage_profile", "admin"])
def _enforce_signed_in():
    """Ensure the requester is signed in."""
    return None


@profile_bp.route("", methods=["GET"])
def get_profile():
    return ok({"user": g.user.to_dict()})


@profile_bp.route("", methods=["PATCH"])
@validate_schema(ProfileUpdateRequest)
def update_profile():
    data: ProfileUpdateRequest = request.validated_data
    user = g.user
    if data.username and data.username != user.username:
        if UserProfile.query.filter_by(username=data.username).first():
            raise ProviderError("auth/username-taken")
        user.username = data.username
    if data.full_name:
        user.full_name = data.full_name
    if data.email is not None:
        user.email = data.email.strip().lower()
    with transactional("Failed to update profile"):
        db.session.add(user)
    return ok({"user": user.to_dict()}, message="Profile updated")


@profile_bp.route("/addresses", methods=["POST"])
@validate_schema(AddressRequest)
def add_address():
    data: AddressRequest = request.validated_data
    user = g.user
    address = Address(
        user_id=user.uid,
        position=len(user.addresses),
        is_default=len(user.addresses) == 0,
        **data.model_dump(),
    )
    with transactional("Failed to add address"):
        db.session.add(address)
    return ok({"address": address.to_dict()}, message="Address added", status=201)


@profile_bp.route("/addresses/<address_id>", methods=["DELETE"])
def remove_address(address_id):
    user = g.user
    address = Address.query.filter_by(id=address_id, user_id=user.uid).first()
    if address is None:
        raise NotFound("Address not found")
    was_default = address.is_default
    with transactional("Failed to remove address"):
        db.session.delete(address)
        db.session.flush()
        remaining = Address.query.filter_by(user_id=user.uid).order_by(Address.position).all()
        if was_default and remaining:
            remaining[0].is_default = True
    return ok({"removed": address_id}, message="Address removed")


@profile_bp.route("/orders", methods=["GET"])
def my_orders():
    orders = (
        Order.query.filter_by(user_id=g.user.uid)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return ok({"orders": [o.to_dict() for o in orders]})
