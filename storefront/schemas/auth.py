from typing import Optional
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = ""


class SignupData(BaseModel):
    phone_number: str
    email: Optional[str] = None
    username: str
    full_name: str
    password: str


class SignupPhoneRequest(BaseModel):
    phone: str = ""


class SignupCodeRequest(BaseModel):
    code: str = ""


class SignupDetailsRequest(BaseModel):
    username: str = ""
    full_name: str = ""
    password: str = ""
    email: Optional[str] = None
