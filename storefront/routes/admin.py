from flask import Blueprint, current_app, request
from models import db
from models.catalog import Product
from models.order import Order
from models.user import UserProfile
from storefront.exceptions import NotFound, ValidationFailed
from storefront.schemas.admin import OrderStatusRequest
from storefront.schemas.catalog import ProductCreateRequest, ProductUpdateRequest
from storefront.services.catalog import serialize_product
from storefront.services.orders import update_order_status
from storefront.utils import auth_required, role_required, ok, transactional, validate_schema
from storefront.version import API_PREFIX

admin_bp = Blueprint("admin", __name__, url_prefix=f"{API_PREFIX}/admin")


@admin_bp.before_request
@auth_required
@role_required("admin")
def _enforce_admin_role():
    """Ensure the requester is an authenticated admin."""
    return None


@admin_bp.route("/users", methods=["GET"])
def list_users():
    users = UserProfile.query.order_by(UserProfile.created_at.desc()).limit(50).all()
    return ok({"users": [{"uid": u.uid, "username": u.username, "role": u.role} for u in users]})


@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    query = Order.query
    status = request.args.get("status")
    if status:
        query = query.filter_by(status=status)
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return ok({"orders": [o.to_dict() for o in orders]})


@admin_bp.route("/orders/<int:order_id>/status", methods=["POST"])
@validate_schema(OrderStatusRequest)
def set_order_status(order_id):
    data: OrderStatusRequest = request.validated_data
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found")
    with transactional("Failed to update order status"):
        update_order_status(order, data.status, data.estimated_delivery_date)
    return ok({"order": order.to_dict()}, message="Order status updated")


@admin_bp.route("/stats", methods=["GET"])
def dashboard_stats():
    dashboard = current_app.extensions["admin_dashboard"]
    return ok({"stats": dashboard.refresh()})


@admin_bp.route("/products", methods=["GET"])
def list_products():
    products = Product.query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return ok({"products": [serialize_product(p) for p in products]})


@admin_bp.route("/products", methods=["POST"])
@validate_schema(ProductCreateRequest)
def add_product():
    data: ProductCreateRequest = request.validated_data
    product = Product(**data.model_dump())
    with transactional("Failed to add product"):
        db.session.add(product)
    return ok({"product": serialize_product(product)}, message="Product added", status=201)


@admin_bp.route("/products/<int:product_id>", methods=["PATCH"])
@validate_schema(ProductUpdateRequest)
def update_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    updates = request.validated_data.model_dump(exclude_none=True)
    price = updates.get("price", product.price)
    original_price = updates.get("original_price", product.original_price)
    if price > original_price:
        raise ValidationFailed("price must not exceed original_price")
    for key, value in updates.items():
        setattr(product, key, value)
    with transactional("Failed to update product"):
        db.session.add(product)
    return ok({"product": serialize_product(product)}, message="Product updated")


@admin_bp.route("/products/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    with transactional("Failed to delete product"):
        db.session.delete(product)
    return ok({"deleted": product_id}, message="Product deleted")
