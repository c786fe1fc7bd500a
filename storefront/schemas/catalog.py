from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    price: float = Field(ge=0)
    original_price: float = Field(ge=0)
    description: str = ""
    category: str = "candle"
    images: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    specifications: Dict[str, str] = Field(default_factory=dict)
    in_stock: bool = True

    @model_validator(mode="after")
    def _price_not_above_original(self):
        if self.price > self.original_price:
            raise ValueError("price must not exceed original_price")
        return self


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    specifications: Optional[Dict[str, str]] = None
    in_stock: Optional[bool] = None


class ProductListQuery(BaseModel):
    category: Optional[str] = Field(default=None, max_length=40)
