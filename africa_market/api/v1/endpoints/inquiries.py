"""Public contact form and booking requests."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from africa_market.db.session import get_db
from africa_market.models.inquiry import Booking, Contact
from africa_market.schemas.inquiry import BookingCreate, BookingRead, ContactCreate, ContactRead
from africa_market.services.inquiry_service import create_booking, create_contact

router: APIRouter = APIRouter()


@router.post("/contacts", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
def submit_contact(payload: ContactCreate, db: Session = Depends(get_db)) -> Contact:
    return create_contact(db, name=payload.name, email=payload.email, message=payload.message)


@router.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def submit_booking(payload: BookingCreate, db: Session = Depends(get_db)) -> Booking:
    return create_booking(db, **payload.model_dump())
