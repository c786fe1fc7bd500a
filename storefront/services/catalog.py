import logging

from models import db
from models.catalog import Product
from storefront.schemas.cart import ProductSnapshot
from storefront.services.pricing import percent_off
from storefront.utils.db import transactional

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = [
    {
        "name": "Vanilla Dream",
        "price": 790,
        "original_price": 990,
        "description": "Warm vanilla bean with a soft caramel finish.",
        "features": ["Soy wax", "Cotton wick", "40 hour burn"],
        "specifications": {"Weight": "200g", "Burn time": "40 hours"},
    },
    {
        "name": "Lavender Fields",
        "price": 840,
        "original_price": 1050,
        "description": "Calming French lavender for quiet evenings.",
        "features": ["Soy wax", "Essential oils"],
        "specifications": {"Weight": "200g", "Burn time": "40 hours"},
    },
    {
        "name": "Eucalyptus Mint",
        "price": 740,
        "original_price": 900,
        "description": "Fresh eucalyptus lifted with cool mint.",
        "features": ["Soy wax", "Cotton wick"],
        "specifications": {"Weight": "180g", "Burn time": "35 hours"},
    },
    {
        "name": "Sandalwood Essence",
        "price": 920,
        "original_price": 1150,
        "description": "Creamy sandalwood with a hint of amber.",
        "features": ["Coconut soy blend", "Wooden wick"],
        "specifications": {"Weight": "220g", "Burn time": "45 hours"},
    },
    {
        "name": "Starter Gift Set",
        "category": "gift-set",
        "price": 1290,
        "original_price": 1590,
        "description": "Three travel candles in a keepsake box.",
        "features": ["3 x 60g candles", "Gift box"],
        "specifications": {"Contents": "3 candles", "Burn time": "3 x 15 hours"},
    },
    {
        "name": "Luxury Gift Box",
        "category": "gift-set",
        "price": 2990,
        "original_price": 3490,
        "description": "Signature candles, matches and a snuffer.",
        "features": ["2 x 200g candles", "Brass snuffer", "Match box"],
        "specifications": {"Contents": "4 pieces", "Burn time": "2 x 40 hours"},
    },
]


def serialize_product(product: Product) -> dict:
    data = product.to_dict()
    data["percent_off"] = percent_off(product.price, product.original_price)
    return data


def snapshot_product(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        price=product.price,
        original_price=product.original_price,
        description=product.description or "",
        images=list(product.images or []),
        features=list(product.features or []),
        specifications=dict(product.specifications or {}),
    )


def seed_catalog(entries=None) -> int:
    """Insert catalogue entries whose name is not present yet."""
    added = 0
    with transactional("Failed to seed catalog"):
        for entry in entries or DEFAULT_CATALOG:
            if Product.query.filter_by(name=entry["name"]).first():
                continue
            db.session.add(Product(**entry))
            added += 1
    logger.info("Seeded %s catalog products", added)
    return added
