"""Customer endpoints: saved addresses, checkout and order history."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from africa_market.core.security import get_current_user
from africa_market.db.session import get_db
from africa_market.models.address import Address
from africa_market.models.user import User
from africa_market.schemas.address import AddressCreate, AddressRead, AddressUpdate
from africa_market.schemas.order import CheckoutRequest, OrderEnvelope, OrderListEnvelope, OrderRead
from africa_market.services import address_service
from africa_market.services.notifications import Notifier, get_notifier
from africa_market.services.order_service import CartItem, get_user_order, list_user_orders, place_order

router: APIRouter = APIRouter()


@router.get("/addresses", response_model=list[AddressRead])
def read_addresses(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[Address]:
    return address_service.list_user_addresses(db, current_user.id)


@router.post("/addresses", response_model=AddressRead, status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Address:
    return address_service.create_address(db, user_id=current_user.id, payload=payload.model_dump())


@router.put("/addresses/{address_id}", response_model=AddressRead)
def update_address(
    address_id: int,
    payload: AddressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Address:
    return address_service.update_address(
        db,
        user_id=current_user.id,
        address_id=address_id,
        changes=payload.model_dump(exclude_unset=True),
    )


@router.delete("/addresses/{address_id}")
def delete_address(
    address_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, bool | str]:
    address_service.delete_address(db, user_id=current_user.id, address_id=address_id)
    return {"success": True, "message": "Address deleted"}


@router.put("/addresses/{address_id}/default", response_model=AddressRead)
def make_default_address(
    address_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Address:
    return address_service.set_default_address(db, user_id=current_user.id, address_id=address_id)


@router.post("/checkout", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: CheckoutRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> OrderEnvelope:
    order, _ = place_order(
        db,
        user=current_user,
        items=[CartItem(product_id=item.id, quantity=item.quantity, price=item.price) for item in payload.items],
        notifier=notifier,
        address=payload.address.model_dump() if payload.address is not None else None,
        address_id=payload.address_id,
        save_address=payload.save_address,
        shipping_cost=payload.shipping_cost,
    )
    return OrderEnvelope(message="Order placed successfully", order=OrderRead.from_order(order))


@router.get("/orders", response_model=OrderListEnvelope)
def read_my_orders(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> OrderListEnvelope:
    orders = list_user_orders(db, current_user.id)
    return OrderListEnvelope(orders=[OrderRead.from_order(order) for order in orders])


@router.get("/orders/{order_id}", response_model=OrderEnvelope)
def read_my_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> OrderEnvelope:
    order = get_user_order(db, user_id=current_user.id, order_id=order_id)
    return OrderEnvelope(order=OrderRead.from_order(order))
