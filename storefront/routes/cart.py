from flask import Blueprint, request, current_app
from extensions import per_ip_limit
from models import db
from models.catalog import Product
from storefront.exceptions import NotFound
from storefront.schemas.cart import (
    AddToCartRequest,
    CheckoutRequest,
    RemoveItemRequest,
    UpdateQuantityRequest,
)
from storefront.services.cart import CartEngine
from storefront.services.catalog import snapshot_product
from storefront.services.orders import SqlOrderBook
from storefront.services.storage import DatabaseStorage
from storefront.utils import ok, current_identity, validate_schema
from storefront.version import API_PREFIX

cart_bp = Blueprint("cart", __name__, url_prefix=f"{API_PREFIX}/cart")


def _engine() -> CartEngine:
    uid = current_identity()
    owner = uid or f"anon:{request.headers.get('X-Cart-Session', 'guest')[:64]}"
    cfg = current_app.config
    return CartEngine(
        DatabaseStorage(),
        owner=owner,
        current_user=lambda: uid,
        orders=SqlOrderBook(),
        gift_charge=cfg["GIFT_CHARGE"],
        platform_fee=cfg["PLATFORM_FEE"],
        storage_key=cfg["CART_STORAGE_KEY"],
    )


def _cart_payload(engine: CartEngine) -> dict:
    return {
        "items": [item.model_dump(mode="json") for item in engine.items],
        "summary": engine.get_cart_summary().model_dump(),
    }


def _find_product(product_id):
    try:
        product = db.session.get(Product, int(product_id))
    except (TypeError, ValueError):
        product = None
    if product is None or not product.in_stock:
        raise NotFound("Product not available")
    return product


@cart_bp.route("/view", methods=["GET"])
def view_cart():
    return ok(_cart_payload(_engine()))


@cart_bp.route("/add", methods=["POST"])
@validate_schema(AddToCartRequest)
def add_to_cart():
    data: AddToCartRequest = request.validated_data
    engine = _engine()
    product = _find_product(data.product_id)
    item = engine.add_to_cart(snapshot_product(product), is_gift=data.is_gift, quantity=data.quantity)
    payload = _cart_payload(engine)
    payload["item_id"] = item.id
    return ok(payload, message="Item added to cart")


@cart_bp.route("/update", methods=["POST"])
@validate_schema(UpdateQuantityRequest)
def update_cart_quantity():
    data: UpdateQuantityRequest = request.validated_data
    engine = _engine()
    engine.update_quantity(data.item_id, data.quantity)
    return ok(_cart_payload(engine), message="Cart quantity updated")


@cart_bp.route("/remove", methods=["POST"])
@validate_schema(RemoveItemRequest)
def remove_item():
    engine = _engine()
    engine.remove_from_cart(request.validated_data.item_id)
    return ok(_cart_payload(engine), message="Item removed")


@cart_bp.route("/clear", methods=["POST"])
def clear_cart():
    engine = _engine()
    engine.clear_cart()
    return ok(_cart_payload(engine), message="Cart cleared")


@cart_bp.route("/contains/<product_id>", methods=["GET"])
def contains(product_id):
    return ok({"product_id": product_id, "in_cart": _engine().is_in_cart(product_id)})


@cart_bp.route("/checkout", methods=["POST"])
@per_ip_limit("ORDER_LIMIT_PER_IP", "Too many orders from this IP")
@validate_schema(CheckoutRequest)
def checkout():
    order_id = _engine().checkout(request.validated_data.address_id)
    return ok({"order_id": order_id}, message="Order placed successfully", status=201)
