"""Saved address schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AddressCreate(BaseModel):
    full_name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    phone: str | None = None
    is_default: bool = False


class AddressUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    full_name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    phone: str | None = None
    is_default: bool | None = None


class AddressRead(BaseModel):
    id: int
    user_id: int
    full_name: str
    street_address: str
    city: str
    state: str | None
    zip_code: str | None
    country: str
    phone: str | None
    is_default: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
