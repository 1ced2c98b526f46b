"""Checkout and order persistence.

``place_order`` is the checkout entry point: it validates the cart, prices it
against the live catalog, resolves the shipping address and hands everything
to ``write_order``, which persists the header and its lines as one unit of
work. The invoice email is attempted only after the commit.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from africa_market.core.config import settings
from africa_market.core.errors import NotFoundError, OrderCreationError, ValidationError
from africa_market.models.order import ORDER_STATUSES, Order, OrderItem
from africa_market.models.product import Product
from africa_market.models.user import User
from africa_market.services.address_service import ResolvedAddress, resolve_shipping_address
from africa_market.services.notifications import Notifier, dispatch
from africa_market.services.pricing import OrderTotals, calculate_totals, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """One line to persist, carrying the unit price captured at purchase."""

    product_id: int
    quantity: int
    price: Decimal
    product_name: str | None = None


@dataclass(frozen=True)
class CartItem:
    product_id: int
    quantity: int
    price: Any = None


def _order_query():
    return select(Order).options(
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.user),
    )


def write_order(
    db: Session,
    *,
    user_id: int,
    subtotal: Decimal,
    shipping_cost: Decimal,
    shipping_address: str,
    address_id: int | None,
    status: str,
    lines: Sequence[OrderLine],
) -> Order:
    """Persist an order header and all of its lines atomically.

    Anything already staged in ``db`` (for example a freshly saved address)
    commits or rolls back together with the order.
    """
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}")
    if not lines:
        raise ValidationError("Cart is empty")

    try:
        order = Order(
            user_id=user_id,
            total_amount=subtotal,
            shipping_cost=shipping_cost,
            shipping_address=shipping_address,
            address_id=address_id,
            status=status,
        )
        db.add(order)
        db.flush()

        for line in lines:
            db.add(
                OrderItem(
                    order_id=order.id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    price=line.price,
                )
            )
            db.flush()

        db.commit()
    except Exception as exc:
        db.rollback()
        logger.exception("[CHECKOUT] Order write rolled back for user_id=%s", user_id)
        raise OrderCreationError("Error creating order") from exc

    db.refresh(order)
    logger.info("[CHECKOUT] Created order_id=%s for user_id=%s with %s item(s)", order.id, user_id, len(lines))
    return order


def price_cart(db: Session, items: Sequence[CartItem]) -> list[OrderLine]:
    """Capture live catalog prices for the requested products."""
    if not items:
        raise ValidationError("Cart is empty")

    product_ids = {item.product_id for item in items}
    products = {
        product.id: product
        for product in db.scalars(select(Product).where(Product.id.in_(product_ids))).all()
    }
    missing = sorted(product_ids - products.keys())
    if missing:
        raise ValidationError(f"Unknown product(s): {', '.join(str(pid) for pid in missing)}")

    lines: list[OrderLine] = []
    for item in items:
        if item.quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        product = products[item.product_id]
        if item.price is not None and to_decimal(item.price) != product.price:
            logger.warning(
                "[CHECKOUT] Client price %s differs from catalog price %s for product_id=%s",
                item.price,
                product.price,
                product.id,
            )
        lines.append(
            OrderLine(product_id=product.id, quantity=item.quantity, price=product.price, product_name=product.name)
        )
    return lines


def place_order(
    db: Session,
    *,
    user: User,
    items: Sequence[CartItem],
    notifier: Notifier,
    address: dict[str, Any] | None = None,
    address_id: int | None = None,
    save_address: bool = False,
    shipping_cost: Any = None,
) -> tuple[Order, OrderTotals]:
    """Run a checkout end to end and return the stored order with its totals."""
    lines = price_cart(db, items)
    totals = calculate_totals(lines, shipping_cost)
    resolved: ResolvedAddress = resolve_shipping_address(
        db,
        user_id=user.id,
        address_id=address_id,
        address=address,
        save_address=save_address,
    )

    order = write_order(
        db,
        user_id=user.id,
        subtotal=totals.subtotal,
        shipping_cost=totals.shipping,
        shipping_address=resolved.text,
        address_id=resolved.address_id,
        status=settings.order_initial_status,
        lines=lines,
    )

    stored = get_order(db, order.id)
    result = dispatch(notifier.send_invoice, stored, user, stored.items)
    if not result.success:
        logger.warning("[CHECKOUT] Invoice for order_id=%s not delivered: %s", stored.id, result.error)
    return stored, totals


def order_totals(order: Order) -> OrderTotals:
    subtotal = Decimal(order.total_amount)
    shipping = Decimal(order.shipping_cost)
    return OrderTotals(subtotal=subtotal, shipping=shipping, total=subtotal + shipping)


def list_orders(db: Session) -> list[Order]:
    return list(db.scalars(_order_query().order_by(Order.created_at.desc(), Order.id.desc())).all())


def list_user_orders(db: Session, user_id: int) -> list[Order]:
    return list(
        db.scalars(
            _order_query().where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
        ).all()
    )


def get_order(db: Session, order_id: int) -> Order:
    order = db.scalar(_order_query().where(Order.id == order_id))
    if order is None:
        raise NotFoundError("Order not found")
    return order


def get_user_order(db: Session, *, user_id: int, order_id: int) -> Order:
    """Return the order only to its owner; other users get a 404."""
    order = db.scalar(_order_query().where(Order.id == order_id, Order.user_id == user_id))
    if order is None:
        raise NotFoundError("Order not found")
    return order
