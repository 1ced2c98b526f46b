"""Order status transition helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session

from africa_market.core.config import settings
from africa_market.core.errors import ValidationError
from africa_market.models.order import ORDER_STATUSES, Order
from africa_market.services.notifications import Notifier, dispatch
from africa_market.services.order_service import get_order

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "shipped", "delivering", "delivered", "cancelled"},
    "processing": {"shipped", "delivering", "delivered", "cancelled"},
    "shipped": {"delivering", "delivered", "cancelled"},
    "delivering": {"delivered", "cancelled"},
    "delivered": set(),
    "cancelled": set(),
}


class InvalidTransitionError(ValidationError):
    """Requested status is whitelisted but not reachable from the current one."""


def ensure_known_status(status: str) -> None:
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}")


def can_transition(current: str, new: str, *, strict: bool = True) -> bool:
    """Return whether order can move from current to new status."""
    if new not in ORDER_STATUSES:
        return False
    if current == new:
        return True
    if not strict:
        return True
    return new in ALLOWED_TRANSITIONS.get(current, set())


def update_order_status(
    db: Session,
    *,
    order_id: int,
    new_status: str,
    notifier: Notifier,
    strict: bool | None = None,
) -> Order:
    """Validate and persist a status change, then notify on first delivery.

    Re-applying the current status is accepted and changes nothing, so a
    repeated ``delivered`` never sends a second confirmation.
    """
    ensure_known_status(new_status)
    strict = settings.strict_status_transitions if strict is None else strict

    order = get_order(db, order_id)
    previous = order.status
    if not can_transition(previous, new_status, strict=strict):
        raise InvalidTransitionError(f"Cannot change order status from {previous} to {new_status}")

    if previous == new_status:
        logger.info("[ORDERS] order_id=%s already %s; nothing to do", order.id, previous)
        return order

    # Compare-and-set on the previous status: only one concurrent caller wins the move.
    result = db.execute(
        update(Order)
        .where(Order.id == order_id, Order.status == previous)
        .values(status=new_status, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    order = get_order(db, order_id)
    if result.rowcount == 0:
        logger.info("[ORDERS] order_id=%s changed concurrently; now %s", order_id, order.status)
        return order
    logger.info("[ORDERS] order_id=%s status %s -> %s", order_id, previous, new_status)

    if new_status == "delivered":
        sent = dispatch(notifier.send_delivery_confirmation, order, order.user, order.items)
        if not sent.success:
            logger.warning("[ORDERS] Delivery email for order_id=%s not delivered: %s", order.id, sent.error)
    return order
