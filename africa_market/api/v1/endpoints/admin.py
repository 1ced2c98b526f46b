"""Back-office endpoints; every route requires an admin account."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from africa_market.core.security import get_password_hash, require_admin
from africa_market.db.session import get_db
from africa_market.models.inquiry import Booking, Contact
from africa_market.models.product import Product
from africa_market.models.user import User
from africa_market.schemas.auth import PasswordReset, UserRead
from africa_market.schemas.inquiry import BookingRead, ContactRead
from africa_market.schemas.order import OrderEnvelope, OrderListEnvelope, OrderRead, StatusUpdate
from africa_market.schemas.product import ProductCreate, ProductRead, ProductUpdate
from africa_market.services import catalog_service, inquiry_service, user_service
from africa_market.services.notifications import Notifier, get_notifier
from africa_market.services.order_service import get_order, list_orders
from africa_market.services.order_status import update_order_status

router: APIRouter = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("/products", response_model=list[ProductRead])
def read_products(db: Session = Depends(get_db)) -> list[Product]:
    return catalog_service.list_products(db)


@router.get("/products/{product_id}", response_model=ProductRead)
def read_product(product_id: int, db: Session = Depends(get_db)) -> Product:
    return catalog_service.get_product(db, product_id)


@router.post("/products", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)) -> Product:
    return catalog_service.create_product(db, payload.model_dump())


@router.put("/products/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)) -> Product:
    return catalog_service.update_product(db, product_id, payload.model_dump(exclude_unset=True))


@router.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)) -> dict[str, bool | str]:
    catalog_service.delete_product(db, product_id)
    return {"success": True, "message": "Product deleted"}


@router.get("/users", response_model=list[UserRead])
def read_users(db: Session = Depends(get_db)) -> list[User]:
    return user_service.list_customers(db)


@router.get("/users/{user_id}", response_model=UserRead)
def read_user(user_id: int, db: Session = Depends(get_db)) -> User:
    return user_service.get_user_or_404(db, user_id)


@router.put("/users/{user_id}/password")
def reset_user_password(user_id: int, payload: PasswordReset, db: Session = Depends(get_db)) -> dict[str, bool | str]:
    user_service.ensure_password_strength(payload.new_password)
    user_service.update_password(db, user_id, get_password_hash(payload.new_password))
    logger.info("[AUTH] Password reset by admin for user_id=%s", user_id)
    return {"success": True, "message": "Password updated"}


@router.put("/users/{user_id}/toggle-active", response_model=UserRead)
def toggle_user_active(user_id: int, db: Session = Depends(get_db)) -> User:
    return user_service.toggle_active(db, user_id)


@router.get("/orders", response_model=OrderListEnvelope)
def read_orders(db: Session = Depends(get_db)) -> OrderListEnvelope:
    return OrderListEnvelope(orders=[OrderRead.from_order(order) for order in list_orders(db)])


@router.get("/orders/{order_id}", response_model=OrderEnvelope)
def read_order(order_id: int, db: Session = Depends(get_db)) -> OrderEnvelope:
    return OrderEnvelope(order=OrderRead.from_order(get_order(db, order_id)))


@router.put("/orders/{order_id}/status", response_model=OrderEnvelope)
def change_order_status(
    order_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> OrderEnvelope:
    order = update_order_status(db, order_id=order_id, new_status=payload.status, notifier=notifier)
    return OrderEnvelope(message="Order status updated", order=OrderRead.from_order(order))


@router.get("/contacts", response_model=list[ContactRead])
def read_contacts(db: Session = Depends(get_db)) -> list[Contact]:
    return inquiry_service.list_contacts(db)


@router.delete("/contacts/{contact_id}")
def delete_contact(contact_id: int, db: Session = Depends(get_db)) -> dict[str, bool | str]:
    inquiry_service.delete_contact(db, contact_id)
    return {"success": True, "message": "Contact deleted"}


@router.get("/bookings", response_model=list[BookingRead])
def read_bookings(db: Session = Depends(get_db)) -> list[Booking]:
    return inquiry_service.list_bookings(db)


@router.delete("/bookings/{booking_id}")
def delete_booking(booking_id: int, db: Session = Depends(get_db)) -> dict[str, bool | str]:
    inquiry_service.delete_booking(db, booking_id)
    return {"success": True, "message": "Booking deleted"}
