"""Saved addresses and checkout shipping-address resolution."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from africa_market.core.config import settings
from africa_market.core.errors import NotFoundError, ValidationError
from africa_market.models.address import Address

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("full_name", "street_address", "city", "country")
ADDRESS_FIELDS: tuple[str, ...] = (
    "full_name", "street_address", "city", "state", "zip_code", "country", "phone", "is_default",
)
SNAPSHOT_FIELDS: tuple[str, ...] = ("street_address", "city", "state", "zip_code", "country")


class InvalidAddressError(NotFoundError):
    """Checkout referenced an address that is missing or owned by someone else."""

    status_code = 400


@dataclass(frozen=True)
class ResolvedAddress:
    """Immutable shipping snapshot plus the optional saved-address reference."""

    text: str
    address_id: int | None = None


def _field(address: Address | Mapping[str, Any], name: str) -> Any:
    if isinstance(address, Mapping):
        return address.get(name)
    return getattr(address, name, None)


def format_address(address: Address | Mapping[str, Any] | None) -> str:
    """Join street, city, state, zip and country, skipping empty parts."""
    if address is None:
        return ""
    parts = [str(_field(address, name)).strip() for name in SNAPSHOT_FIELDS if _field(address, name)]
    return ", ".join(part for part in parts if part)


def _clean(payload: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for name in ADDRESS_FIELDS:
        if name not in payload:
            continue
        value = payload[name]
        if isinstance(value, str):
            value = value.strip() or None
        cleaned[name] = value
    if not cleaned.get("country"):
        cleaned["country"] = settings.default_country
    return cleaned


def validate_address_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    cleaned = _clean(payload)
    missing = [name for name in REQUIRED_FIELDS if not cleaned.get(name)]
    if missing:
        raise ValidationError("Please provide full name, street address, city, and country")
    cleaned["is_default"] = bool(cleaned.get("is_default"))
    return cleaned


def list_user_addresses(db: Session, user_id: int) -> list[Address]:
    return list(
        db.scalars(
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
        ).all()
    )


def get_owned_address(db: Session, *, user_id: int, address_id: int) -> Address:
    """Return the address only when it belongs to the user; 404 otherwise."""
    address = db.get(Address, address_id)
    if address is None or address.user_id != user_id:
        raise NotFoundError("Address not found")
    return address


def _apply_default(db: Session, *, user_id: int, address_id: int) -> None:
    """Clear other defaults and set this one inside the caller's transaction."""
    # Lock the user's address rows so concurrent swaps for the same user serialize.
    db.execute(select(Address.id).where(Address.user_id == user_id).with_for_update()).all()
    db.execute(
        update(Address)
        .where(Address.user_id == user_id, Address.id != address_id)
        .values(is_default=False)
        .execution_options(synchronize_session="fetch")
    )
    db.execute(
        update(Address)
        .where(Address.id == address_id, Address.user_id == user_id)
        .values(is_default=True)
        .execution_options(synchronize_session="fetch")
    )


def add_address(db: Session, *, user_id: int, payload: Mapping[str, Any]) -> Address:
    """Stage a new address (flush only); default swap included. Caller commits."""
    data = validate_address_payload(payload)
    make_default = data.pop("is_default")
    address = Address(user_id=user_id, is_default=False, **data)
    db.add(address)
    db.flush()
    if make_default:
        _apply_default(db, user_id=user_id, address_id=address.id)
    return address


def create_address(db: Session, *, user_id: int, payload: Mapping[str, Any]) -> Address:
    address = add_address(db, user_id=user_id, payload=payload)
    db.commit()
    db.refresh(address)
    return address


def update_address(db: Session, *, user_id: int, address_id: int, changes: Mapping[str, Any]) -> Address:
    address = get_owned_address(db, user_id=user_id, address_id=address_id)
    current = {name: getattr(address, name) for name in ADDRESS_FIELDS}
    current.update({name: value for name, value in changes.items() if name in ADDRESS_FIELDS})
    data = validate_address_payload(current)
    make_default = data.pop("is_default")

    for name, value in data.items():
        setattr(address, name, value)
    if make_default:
        db.flush()
        _apply_default(db, user_id=user_id, address_id=address.id)
    else:
        address.is_default = False
    db.commit()
    db.refresh(address)
    return address


def delete_address(db: Session, *, user_id: int, address_id: int) -> None:
    address = get_owned_address(db, user_id=user_id, address_id=address_id)
    db.delete(address)
    db.commit()


def set_default_address(db: Session, *, user_id: int, address_id: int) -> Address:
    address = get_owned_address(db, user_id=user_id, address_id=address_id)
    _apply_default(db, user_id=user_id, address_id=address.id)
    db.commit()
    db.refresh(address)
    return address


def resolve_shipping_address(
    db: Session,
    *,
    user_id: int,
    address_id: int | None = None,
    address: Mapping[str, Any] | None = None,
    save_address: bool = False,
) -> ResolvedAddress:
    """Turn a checkout address choice into the order's shipping snapshot.

    A saved reference wins over an inline payload. A saved reference must
    belong to ``user_id``; missing and foreign rows get the same
    ``InvalidAddressError`` so other users' rows stay invisible. With ``save_address``
    the inline payload is staged in the current transaction and committed
    together with the order.
    """
    if address_id is not None:
        try:
            saved = get_owned_address(db, user_id=user_id, address_id=address_id)
        except NotFoundError as exc:
            raise InvalidAddressError("Invalid address") from exc
        return ResolvedAddress(text=format_address(saved), address_id=saved.id)

    if not address:
        raise ValidationError("Shipping address is required")

    if save_address:
        saved = add_address(db, user_id=user_id, payload=address)
        logger.info("[CHECKOUT] Saved new address_id=%s for user_id=%s", saved.id, user_id)
        return ResolvedAddress(text=format_address(saved), address_id=saved.id)

    data = validate_address_payload(address)
    return ResolvedAddress(text=format_address(data))
