from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel


class OrderStatusRequest(BaseModel):
    status: Literal["pending_payment", "processing", "shipped", "delivered", "cancelled"]
    estimated_delivery_date: Optional[datetime] = None
