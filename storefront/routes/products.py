from flask import Blueprint, request
from models import db
from models.catalog import Product
from storefront.exceptions import NotFound
from storefront.schemas.catalog import ProductListQuery
from storefront.services.catalog import serialize_product
from storefront.utils import ok, validate_schema
from storefront.version import API_PREFIX

products_bp = Blueprint("products", __name__, url_prefix=API_PREFIX)


@products_bp.route("/products", methods=["GET"])
@validate_schema(ProductListQuery, source="query")
def list_products():
    params: ProductListQuery = request.validated_data
    query = Product.query
    if params.category:
        query = query.filter_by(category=params.category)
    products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return ok({"products": [serialize_product(p) for p in products]})


@products_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return ok({"product": serialize_product(product)})
