"""Order persistence and the order status lifecycle."""
import logging
from datetime import datetime
from typing import List, Optional

from models import db
from models.order import Order, OrderItem
from models.user import Address
from storefront.exceptions import InvalidTransition
from storefront.metrics import ORDERS_PLACED
from storefront.schemas.cart import OrderLine
from storefront.utils.db import transactional

logger = logging.getLogger(__name__)

PENDING_PAYMENT = "pending_payment"
PROCESSING = "processing"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"

# forward-only progression
STATUS_FLOW = [PENDING_PAYMENT, PROCESSING, SHIPPED, DELIVERED]
TERMINAL_STATUSES = {DELIVERED, CANCELLED}


def can_transition(current: str, new: str) -> bool:
    if current in TERMINAL_STATUSES:
        return False
    if new == CANCELLED:
        return True
    if new not in STATUS_FLOW or current not in STATUS_FLOW:
        return False
    return STATUS_FLOW.index(new) > STATUS_FLOW.index(current)


def update_order_status(order: Order, new_status: str, estimated_delivery: Optional[datetime] = None) -> Order:
    """Move ``order`` to ``new_status``. Does NOT commit."""
    if not can_transition(order.status, new_status):
        raise InvalidTransition(f"Cannot move order from {order.status} to {new_status}")
    order.status = new_status
    order.updated_at = datetime.utcnow()
    if estimated_delivery is not None:
        order.estimated_delivery_date = estimated_delivery
    if new_status == DELIVERED:
        order.payment_status = "completed"
    logger.info("Order %s moved to %s", order.id, new_status)
    return order


class SqlOrderBook:
    """Address lookup and order creation backing ``CartEngine.checkout``."""

    def find_address(self, user_id: str, address_id: str) -> Optional[Address]:
        return Address.query.filter_by(id=address_id, user_id=user_id).first()

    def place_order(self, user_id: str, lines: List[OrderLine], address: Address, total: float) -> int:
        order = Order(
            user_id=user_id,
            delivery_address=address.to_dict(),
            order_total=total,
            status=PENDING_PAYMENT,
            payment_status="pending",
        )
        with transactional("Order placement failed"):
            db.session.add(order)
            db.session.flush()
            for line in lines:
                db.session.add(OrderItem(order_id=order.id, **line.model_dump()))
        ORDERS_PLACED.inc()
        return order.id
