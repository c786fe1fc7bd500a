"""Shopping cart of a single owner.

The engine keeps the ordered cart lines in memory, recomputes the pricing
summary on demand and writes the whole cart to a ``KeyValueStorage`` after
every mutation. Loading and saving are best effort: storage failures are
logged and never reach the caller.
"""
import json
import logging
from datetime import datetime
from typing import Callable, List, Optional

from storefront.exceptions import (
    AddressNotFound,
    AuthenticationRequired,
    EmptyCart,
    ValidationFailed,
)
from storefront.metrics import CART_MUTATIONS
from storefront.schemas.cart import CartItem, CartSummary, OrderLine, ProductSnapshot
from storefront.services import pricing

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "candle-craft-cart"
EPOCH = datetime(1970, 1, 1)


def _millis(moment: datetime) -> int:
    return int((moment - EPOCH).total_seconds() * 1000)


class CartEngine:
    def __init__(
        self,
        storage,
        owner: str = "guest",
        current_user: Optional[Callable[[], Optional[str]]] = None,
        orders=None,
        gift_charge: float = pricing.GIFT_CHARGE,
        platform_fee: float = pricing.PLATFORM_FEE,
        storage_key: str = CART_STORAGE_KEY,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._storage = storage
        self._current_user = current_user
        self._orders = orders
        self._gift_charge = gift_charge
        self._platform_fee = platform_fee
        self._clock = clock
        self.storage_key = f"{storage_key}:{owner}"
        self._items: List[CartItem] = self._load()

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    # --- persistence ---

    def _load(self) -> List[CartItem]:
        try:
            raw = self._storage.get(self.storage_key)
            if not raw:
                return []
            return [CartItem.model_validate(entry) for entry in json.loads(raw)]
        except Exception as e:
            logger.error("Error loading cart from storage: %s", e)
            return []

    def _save(self) -> None:
        try:
            payload = json.dumps([item.model_dump(mode="json") for item in self._items])
            self._storage.set(self.storage_key, payload)
        except Exception as e:
            logger.error("Error saving cart to storage: %s", e)

    def _signed_in_user(self) -> Optional[str]:
        return self._current_user() if self._current_user else None

    def _new_item_id(self, product_id) -> str:
        taken = {item.id for item in self._items}
        stamp = _millis(self._clock())
        item_id = f"{product_id}-{stamp}"
        while item_id in taken:
            stamp += 1
            item_id = f"{product_id}-{stamp}"
        return item_id

    # --- operations ---

    def add_to_cart(self, product, is_gift: bool = False, quantity: int = 1) -> CartItem:
        """Append a new line for ``product``; identical lines are never merged."""
        if self._current_user is not None and not self._signed_in_user():
            raise AuthenticationRequired("Please sign in to add items to your cart")
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1")
        if isinstance(product, ProductSnapshot):
            snapshot = product.model_copy(deep=True)
        else:
            snapshot = ProductSnapshot.model_validate(product)

        item = CartItem(
            id=self._new_item_id(snapshot.id),
            product=snapshot,
            quantity=quantity,
            is_gift=is_gift,
            added_at=self._clock(),
        )
        self._items.append(item)
        self._save()
        CART_MUTATIONS.labels("add").inc()
        return item

    def remove_from_cart(self, item_id: str) -> None:
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        self._save()
        CART_MUTATIONS.labels("remove").inc()

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_from_cart(item_id)
            return
        for index, item in enumerate(self._items):
            if item.id == item_id:
                self._items[index] = item.model_copy(update={"quantity": quantity})
                self._save()
                CART_MUTATIONS.labels("update").inc()
                return

    def clear_cart(self) -> None:
        self._items = []
        self._save()
        CART_MUTATIONS.labels("clear").inc()

    def get_cart_summary(self) -> CartSummary:
        return pricing.summarize(self._items, self._gift_charge, self._platform_fee)

    def is_in_cart(self, product_id) -> bool:
        wanted = str(product_id)
        return any(str(item.product.id) == wanted for item in self._items)

    def checkout(self, address_id: str):
        """Turn the cart into a pending order and return the order id."""
        uid = self._signed_in_user()
        if not uid:
            raise AuthenticationRequired("Please sign in to place an order")
        address = self._orders.find_address(uid, address_id) if address_id else None
        if address is None:
            raise AddressNotFound("Delivery address not found")
        if not self._items:
            raise EmptyCart("Cart is empty")

        lines = [
            OrderLine(
                product_id=str(item.product.id),
                product_name=item.product.name,
                product_image=item.product.images[0] if item.product.images else "",
                quantity=item.quantity,
                price=item.product.price,
                total=pricing.line_total(item.product.price, item.quantity),
            )
            for item in self._items
        ]
        summary = self.get_cart_summary()
        order_id = self._orders.place_order(uid, lines, address, summary.total)
        logger.info("Order %s placed by %s for %.2f", order_id, uid, summary.total)
        self.clear_cart()
        return order_id
