from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from models import db


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_user_created", "user_id", "created_at"),
    )
    id = Column(Integer, primary_key=True)
    user_id = Column(String(32), ForeignKey("user_profile.uid"), nullable=False)
    delivery_address = Column(db.JSON, nullable=False)  # snapshot, not a reference
    order_total = Column(Float, nullable=False)
    status = Column(String(30), default="pending_payment")  # pending_payment, processing, shipped, delivered, cancelled
    payment_status = Column(String(20), default="pending")  # pending, completed, failed
    estimated_delivery_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [i.to_dict() for i in self.items],
            "delivery_address": self.delivery_address,
            "order_total": self.order_total,
            "status": self.status,
            "payment_status": self.payment_status,
            "estimated_delivery_date": (
                self.estimated_delivery_date.isoformat() if self.estimated_delivery_date else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class OrderItem(db.Model):
    __tablename__ = "order_item"
    id = db.Column(Integer, primary_key=True)
    order_id = db.Column(Integer, db.ForeignKey("order.id"), nullable=False)

    # Frozen product snapshot
    product_id = db.Column(db.String(64), nullable=False)
    product_name = db.Column(db.String(255))
    product_image = db.Column(db.String(500))
    quantity = db.Column(db.Integer)
    price = db.Column(db.Float)
    total = db.Column(db.Float)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image": self.product_image,
            "quantity": self.quantity,
            "price": self.price,
            "total": self.total,
        }
