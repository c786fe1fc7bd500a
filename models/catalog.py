# --- models/catalog.py ---
from models import db
from datetime import datetime


class Product(db.Model):
    __tablename__ = "product"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), default="candle")         # candle, gift-set

    # Pricing
    price = db.Column(db.Float, nullable=False)                   # Selling price
    original_price = db.Column(db.Float, nullable=False)          # Pre-discount price

    # Presentation
    images = db.Column(db.JSON, default=list)
    features = db.Column(db.JSON, default=list)
    specifications = db.Column(db.JSON, default=dict)

    in_stock = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "category": self.category,
            "price": self.price,
            "original_price": self.original_price,
            "images": list(self.images or []),
            "features": list(self.features or []),
            "specifications": dict(self.specifications or {}),
            "in_stock": self.in_stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
