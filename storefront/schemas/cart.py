from datetime import datetime
from typing import Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field


class ProductSnapshot(BaseModel):
    """Copy of a catalog product taken when it is added to the cart."""

    id: Union[int, str]
    name: str
    price: float
    original_price: float
    description: str = ""
    images: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    specifications: Dict[str, str] = Field(default_factory=dict)


class CartItem(BaseModel):
    id: str
    product: ProductSnapshot
    quantity: int = Field(ge=1)
    is_gift: bool = False
    added_at: datetime


class CartSummary(BaseModel):
    subtotal: float
    total_discount: float
    gift_charges: float
    platform_fee: float
    total: float
    total_items: int


class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    product_image: str
    quantity: int
    price: float
    total: float


class AddToCartRequest(BaseModel):
    product_id: Union[int, str]
    is_gift: bool = False
    quantity: int = 1


class UpdateQuantityRequest(BaseModel):
    item_id: str
    quantity: int


class RemoveItemRequest(BaseModel):
    item_id: str


class CheckoutRequest(BaseModel):
    address_id: str
