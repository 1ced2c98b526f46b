"""Contact and booking schemas; booking fields keep the site's camelCase names on the wire."""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field


class ContactCreate(BaseModel):
    name: str
    email: str
    message: str


class ContactRead(ContactCreate):
    id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingCreate(BaseModel):
    name: str
    phone: str
    email: str | None = None
    order_type: str = Field(alias="orderType")
    appointment_date: date = Field(alias="date")
    appointment_time: time = Field(alias="time")
    description: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class BookingRead(BookingCreate):
    id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
