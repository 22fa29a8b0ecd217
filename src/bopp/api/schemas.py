"""Request bodies for the JSON API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from bopp.models import Role


class RateIn(BaseModel):
    key: str = Field(min_length=1)
    value: Decimal
    id: int | None = None


class RateUpdateRequest(BaseModel):
    rates: list[RateIn]
    actor_id: str
    actor_name: str


class LoginRequest(BaseModel):
    user_id: str
    password: str | None = None


class OTPVerifyRequest(BaseModel):
    otp: str


class AddUserRequest(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: Role
    password: str | None = None


class AdminUpdateRequest(BaseModel):
    name: str | None = None
    new_password: str | None = None
