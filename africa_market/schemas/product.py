"""Product catalog schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ProductCreate(BaseModel):
    name: str
    price: Decimal | None = None
    description: str | None = None
    image: str | None = None


class ProductUpdate(BaseModel):
    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    image: str | None = None


class ProductRead(BaseModel):
    id: int
    name: str
    price: Decimal
    description: str | None
    image: str | None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
