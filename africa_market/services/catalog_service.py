"""Product catalog operations."""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from africa_market.core.errors import NotFoundError, ValidationError
from africa_market.models.product import Product
from africa_market.services.pricing import MAX_AMOUNT, to_decimal

logger = logging.getLogger(__name__)


def _validated_price(value: Any) -> Decimal:
    if value is None or value == "":
        raise ValidationError("Valid price is required")
    try:
        price = to_decimal(value)
    except ValidationError as exc:
        raise ValidationError("Valid price is required") from exc
    if not price.is_finite():
        raise ValidationError("Valid price is required")
    if price <= 0:
        raise ValidationError("Price must be greater than 0")
    if price > MAX_AMOUNT:
        raise ValidationError("Price is too large")
    return price


def _validated_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("Product name is required")
    return name


def list_products(db: Session) -> list[Product]:
    return list(db.scalars(select(Product).order_by(Product.created_at.desc(), Product.id.desc())).all())


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(db: Session, payload: Mapping[str, Any]) -> Product:
    product = Product(
        name=_validated_name(payload.get("name")),
        price=_validated_price(payload.get("price")),
        description=(payload.get("description") or "").strip(),
        image=(payload.get("image") or "").strip(),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("[CATALOG] Created product_id=%s", product.id)
    return product


def update_product(db: Session, product_id: int, changes: Mapping[str, Any]) -> Product:
    """Apply a partial update; omitted fields keep their current values."""
    product = get_product(db, product_id)
    if changes.get("name") is not None:
        product.name = _validated_name(changes["name"])
    if changes.get("price") is not None:
        product.price = _validated_price(changes["price"])
    if "description" in changes:
        product.description = changes["description"]
    if "image" in changes:
        product.image = changes["image"]
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("[CATALOG] Deleted product_id=%s", product_id)
