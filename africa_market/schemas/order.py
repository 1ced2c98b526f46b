"""Checkout and order API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from africa_market.models.order import Order, OrderItem
from africa_market.services.order_service import order_totals
from africa_market.services.pricing import MAX_QUANTITY, to_cents


class CheckoutItem(BaseModel):
    """Cart line as sent by the storefront; ``price`` is informational only."""

    id: int
    quantity: int = Field(ge=1, le=MAX_QUANTITY)
    price: Decimal | None = None


class CheckoutAddress(BaseModel):
    full_name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    phone: str | None = None
    is_default: bool = False


class CheckoutRequest(BaseModel):
    items: list[CheckoutItem] = Field(default_factory=list)
    address: CheckoutAddress | None = None
    address_id: int | None = None
    save_address: bool = False
    shipping_cost: Decimal | str | None = None


class StatusUpdate(BaseModel):
    status: str


class OrderItemRead(BaseModel):
    id: int
    product_id: int | None
    product_name: str | None
    image: str | None
    quantity: int
    price: Decimal

    @classmethod
    def from_item(cls, item: OrderItem) -> "OrderItemRead":
        product = item.product
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=product.name if product is not None else item.product_name,
            image=product.image if product is not None else None,
            quantity=item.quantity,
            price=to_cents(Decimal(item.price)),
        )


class OrderRead(BaseModel):
    """Order header enriched with its customer and lines."""

    id: int
    user_id: int
    username: str | None = None
    email: str | None = None
    status: str
    shipping_address: str | None
    address_id: int | None
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead]

    @classmethod
    def from_order(cls, order: Order) -> "OrderRead":
        totals = order_totals(order).rounded()
        user = order.user
        return cls(
            id=order.id,
            user_id=order.user_id,
            username=user.username if user is not None else None,
            email=user.email if user is not None else None,
            status=order.status,
            shipping_address=order.shipping_address,
            address_id=order.address_id,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping,
            total=totals.total,
            total_amount=totals.subtotal,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemRead.from_item(item) for item in order.items],
        )


class OrderEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    order: OrderRead


class OrderListEnvelope(BaseModel):
    success: bool = True
    orders: list[OrderRead]
