"""Cart pricing: subtotal, shipping surcharge and total."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Protocol

from africa_market.core.config import settings
from africa_market.core.errors import ValidationError

CENTS = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds.
MAX_AMOUNT = Decimal("99999999.99")
MAX_QUANTITY = 10_000


class PricedLine(Protocol):
    price: Any
    quantity: int


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    total: Decimal

    def rounded(self) -> OrderTotals:
        """Return a copy rounded to cents for presentation."""
        return OrderTotals(
            subtotal=to_cents(self.subtotal),
            shipping=to_cents(self.shipping),
            total=to_cents(self.total),
        )


def to_decimal(value: Any) -> Decimal:
    """Convert numbers and numeric strings without going through binary floats."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid amount: {value!r}") from exc


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_shipping_cost(value: Any, default: Decimal | None = None) -> Decimal:
    """Parse the requested shipping cost; missing, unparsable or non-positive means default."""
    fallback = settings.default_shipping_cost if default is None else default
    if value is None or value == "":
        return fallback
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return fallback
    if not parsed.is_finite() or parsed <= 0:
        return fallback
    if parsed > MAX_AMOUNT:
        raise ValidationError("Shipping cost is too large")
    return parsed


def calculate_subtotal(lines: Iterable[PricedLine]) -> Decimal:
    subtotal = Decimal("0")
    for line in lines:
        if line.quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        if line.quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}")
        subtotal += to_decimal(line.price) * line.quantity
    return subtotal


def calculate_totals(lines: Sequence[PricedLine], shipping_cost: Any = None) -> OrderTotals:
    """Compute subtotal, shipping and total for a non-empty cart."""
    if not lines:
        raise ValidationError("Cart is empty")
    subtotal = calculate_subtotal(lines)
    if subtotal > MAX_AMOUNT:
        raise ValidationError("Order total is too large")
    shipping = parse_shipping_cost(shipping_cost)
    if subtotal + shipping > MAX_AMOUNT:
        raise ValidationError("Order total is too large")
    return OrderTotals(subtotal=subtotal, shipping=shipping, total=subtotal + shipping)
