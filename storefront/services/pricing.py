"""Cart and catalogue pricing.

Every discount, percentage and total shown anywhere in the storefront comes
from this module.
"""
from typing import Iterable

from storefront.schemas.cart import CartItem, CartSummary

PLATFORM_FEE = 7
GIFT_CHARGE = 30


def line_total(price: float, quantity: int) -> float:
    return price * quantity


def percent_off(price: float, original_price: float) -> int:
    """Whole-number percentage saved against the original price."""
    if not original_price or original_price <= 0:
        return 0
    return int(round((original_price - price) / original_price * 100))


def summarize(
    items: Iterable[CartItem],
    gift_charge: float = GIFT_CHARGE,
    platform_fee: float = PLATFORM_FEE,
) -> CartSummary:
    subtotal = 0.0
    total_discount = 0.0
    gift_charges = 0.0
    total_items = 0
    for item in items:
        product = item.product
        subtotal += line_total(product.price, item.quantity)
        total_discount += (product.original_price - product.price) * item.quantity
        if item.is_gift:
            gift_charges += gift_charge * item.quantity
        total_items += item.quantity

    # price already carries the discount
    total = subtotal + gift_charges + platform_fee
    return CartSummary(
        subtotal=subtotal,
        total_discount=total_discount,
        gift_charges=gift_charges,
        platform_fee=platform_fee,
        total=total,
        total_items=total_items,
    )
