"""Request bodies for the Walklet HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str
    password: str
    username: str | None = Field(default=None, max_length=32)


class LoginRequest(BaseModel):
    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    id_token: str


class ProfileUpdate(BaseModel):
    """Partial profile update; only supplied fields are changed."""

    username: str | None = Field(default=None, max_length=32)
    age: int | None = Field(default=None, ge=0, le=150)
    weight_kg: float | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    daily_step_goal: int | None = Field(default=None, ge=0)


class WalkCreate(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_s: int = Field(ge=0)
    distance_m: float = Field(ge=0)
    steps: int = Field(ge=0)


class VoucherWalkRequest(BaseModel):
    """Body for walk voucher issuance.

    ``steps`` and ``to`` are validated by the voucher issuer so that every
    malformed value is reported as a 400 with an ``error`` message.
    """

    steps: Any = None
    to: Any = None
