from flask import Blueprint, request
from werkzeug.security import generate_password_hash
import logging
import uuid
from storefront.utils import ok, create_access_token, create_refresh_token
from models import db
from models.user import Account, Address, UserProfile
from models.catalog import Product


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__auth/login_stub", methods=["POST"])
def __login_stub():
    """
    Body: {"username": "u1", "role": "user", "phone": "9876543210"}
    Creates the account and profile if missing and returns tokens.
    """
    j = request.get_json() or {}
    username = j.get("username", "tester")
    role = j.get("role", "user")
    profile = UserProfile.query.filter_by(username=username).first()
    if not profile:
        account = Account(
            uid=uuid.uuid4().hex,
            email=j.get("email", f"{username}@example.com"),
            password_hash=generate_password_hash(j.get("password", "secret123")),
        )
        db.session.add(account)
        db.session.flush()
        profile = UserProfile(
            uid=account.uid,
            email=account.email,
            username=username,
            full_name=j.get("full_name", "Test User"),
            phone_number=j.get("phone", "+919876543210"),
            phone_verified=True,
            role=role,
        )
        db.session.add(profile)
        db.session.commit()
    return ok({
        "uid": profile.uid,
        "access": create_access_token(profile.uid, profile.role),
        "refresh": create_refresh_token(profile.uid),
    })


@test_support_bp.route("/__seed/product", methods=["POST"])
def __seed_product():
    """Body: {"name": "Vanilla", "price": 790, "original_price": 990}"""
    j = request.get_json() or {}
    product = Product(
        name=j.get("name", "Vanilla Dream"),
        price=float(j.get("price", 790)),
        original_price=float(j.get("original_price", 990)),
        category=j.get("category", "candle"),
        images=j.get("images", ["vanilla.jpg"]),
        in_stock=j.get("in_stock", True),
    )
    db.session.add(product)
    db.session.commit()
    return ok({"product_id": product.id})


@test_support_bp.route("/__seed/address", methods=["POST"])
def __seed_address():
    """Body: {"uid": "..."}; adds a default Home address for the user."""
    j = request.get_json() or {}
    address = Address(
        user_id=j["uid"],
        label=j.get("label", "Home"),
        full_name="Test User",
        phone_number="9876543210",
        address_line1="12 Wax Street",
        city="Pune",
        state="MH",
        pincode="411001",
        is_default=True,
    )
    db.session.add(address)
    db.session.commit()
    return ok({"address_id": address.id})
