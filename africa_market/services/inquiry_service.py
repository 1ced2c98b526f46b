"""Contact messages and booking requests submitted from the public site."""

from datetime import date, time

from sqlalchemy import select
from sqlalchemy.orm import Session

from africa_market.core.errors import NotFoundError, ValidationError
from africa_market.models.inquiry import Booking, Contact


def create_contact(db: Session, *, name: str, email: str, message: str) -> Contact:
    if not name.strip() or not email.strip() or not message.strip():
        raise ValidationError("Name, email, and message are required")
    contact = Contact(name=name.strip(), email=email.strip(), message=message.strip())
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def list_contacts(db: Session) -> list[Contact]:
    return list(db.scalars(select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())).all())


def delete_contact(db: Session, contact_id: int) -> None:
    contact = db.get(Contact, contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    db.delete(contact)
    db.commit()


def create_booking(
    db: Session,
    *,
    name: str,
    phone: str,
    order_type: str,
    appointment_date: date,
    appointment_time: time,
    email: str | None = None,
    description: str | None = None,
) -> Booking:
    if not name.strip() or not phone.strip() or not order_type.strip():
        raise ValidationError("Name, phone, order type, date, and time are required")
    booking = Booking(
        name=name.strip(),
        phone=phone.strip(),
        email=(email or "").strip() or None,
        order_type=order_type.strip(),
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        description=(description or "").strip() or None,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def list_bookings(db: Session) -> list[Booking]:
    return list(db.scalars(select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())).all())


def delete_booking(db: Session, booking_id: int) -> None:
    booking = db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    db.delete(booking)
    db.commit()
