from typing import Optional
from pydantic import BaseModel, Field, constr


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[str] = None


class AddressRequest(BaseModel):
    label: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=100)
    phone_number: constr(pattern=r"^\+?\d{10,12}$")
    address_line1: str = Field(min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    pincode: constr(pattern=r"^\d{6}$")
