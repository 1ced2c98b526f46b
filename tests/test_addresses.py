"""Saved address and shipping address resolution tests."""

from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from africa_market.core.errors import NotFoundError, ValidationError
from africa_market.db.base import Base
from africa_market.db.session import Database
from africa_market.models.address import Address
from africa_market.models.user import User
from africa_market.services.address_service import (
    InvalidAddressError,
    create_address,
    delete_address,
    format_address,
    list_user_addresses,
    resolve_shipping_address,
    set_default_address,
    update_address,
)

ADDRESS = {
    "full_name": "Amara Okafor",
    "street_address": "12 Hamra Street",
    "city": "Beirut",
    "state": "Beirut",
    "zip_code": "1103",
    "country": "Lebanon",
    "phone": "+961 1 000000",
}


def _build_database(db_file: Path) -> Database:
    database = Database(f"sqlite:///{db_file}")
    Base.metadata.create_all(bind=database.open())
    return database


def _create_user(session: Session, username: str) -> User:
    user = User(username=username, email=f"{username}@example.com", password_hash="x", role="user")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def _default_count(session: Session, user_id: int) -> int:
    return session.scalar(
        select(func.count()).select_from(Address).where(Address.user_id == user_id, Address.is_default.is_(True))
    )


def test_default_swap_keeps_exactly_one_default(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "default_swap.db")
    with database.session() as session:
        user = _create_user(session, "amara")
        first = create_address(session, user_id=user.id, payload={**ADDRESS, "is_default": True})
        second = create_address(session, user_id=user.id, payload={**ADDRESS, "street_address": "5 Gemmayze"})

        set_default_address(session, user_id=user.id, address_id=second.id)
        assert _default_count(session, user.id) == 1

        set_default_address(session, user_id=user.id, address_id=first.id)
        assert _default_count(session, user.id) == 1

        addresses = list_user_addresses(session, user.id)
        assert addresses[0].id == first.id
        assert addresses[0].is_default is True


def test_creating_default_address_clears_previous_default(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "create_default.db")
    with database.session() as session:
        user = _create_user(session, "kofi")
        create_address(session, user_id=user.id, payload={**ADDRESS, "is_default": True})
        newest = create_address(session, user_id=user.id, payload={**ADDRESS, "city": "Tripoli", "is_default": True})

        assert _default_count(session, user.id) == 1
        session.expire_all()
        assert session.get(Address, newest.id).is_default is True


def test_default_swap_does_not_touch_other_users(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "isolation.db")
    with database.session() as session:
        owner = _create_user(session, "owner")
        other = _create_user(session, "other")
        create_address(session, user_id=other.id, payload={**ADDRESS, "is_default": True})
        mine = create_address(session, user_id=owner.id, payload=ADDRESS)

        set_default_address(session, user_id=owner.id, address_id=mine.id)

        assert _default_count(session, owner.id) == 1
        assert _default_count(session, other.id) == 1


def test_missing_required_fields_are_rejected(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "required.db")
    with database.session() as session:
        user = _create_user(session, "nia")
        with pytest.raises(ValidationError, match="full name, street address, city, and country"):
            create_address(session, user_id=user.id, payload={"full_name": "Nia", "city": "Beirut"})


def test_country_defaults_to_lebanon(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "country.db")
    with database.session() as session:
        user = _create_user(session, "sade")
        payload = {key: value for key, value in ADDRESS.items() if key != "country"}
        address = create_address(session, user_id=user.id, payload=payload)
        assert address.country == "Lebanon"


def test_update_and_delete_require_ownership(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "ownership.db")
    with database.session() as session:
        owner = _create_user(session, "tunde")
        intruder = _create_user(session, "intruder")
        address = create_address(session, user_id=owner.id, payload=ADDRESS)

        with pytest.raises(NotFoundError):
            update_address(session, user_id=intruder.id, address_id=address.id, changes={"city": "Sidon"})
        with pytest.raises(NotFoundError):
            delete_address(session, user_id=intruder.id, address_id=address.id)

        updated = update_address(session, user_id=owner.id, address_id=address.id, changes={"city": "Sidon"})
        assert updated.city == "Sidon"
        assert updated.full_name == ADDRESS["full_name"]


def test_resolve_saved_address_builds_snapshot(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "resolve_saved.db")
    with database.session() as session:
        user = _create_user(session, "ayo")
        address = create_address(session, user_id=user.id, payload=ADDRESS)

        resolved = resolve_shipping_address(session, user_id=user.id, address_id=address.id)

        assert resolved.address_id == address.id
        assert resolved.text == "12 Hamra Street, Beirut, Beirut, 1103, Lebanon"


def test_resolve_foreign_address_is_invalid(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "resolve_foreign.db")
    with database.session() as session:
        owner = _create_user(session, "owner")
        other = _create_user(session, "other")
        address = create_address(session, user_id=owner.id, payload=ADDRESS)

        with pytest.raises(InvalidAddressError) as exc_info:
            resolve_shipping_address(session, user_id=other.id, address_id=address.id)
        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value, NotFoundError)

        with pytest.raises(InvalidAddressError):
            resolve_shipping_address(session, user_id=other.id, address_id=9999)


def test_resolve_requires_an_address(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "resolve_missing.db")
    with database.session() as session:
        user = _create_user(session, "femi")
        with pytest.raises(ValidationError, match="Shipping address is required"):
            resolve_shipping_address(session, user_id=user.id)


def test_resolve_inline_address_without_saving(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "resolve_inline.db")
    with database.session() as session:
        user = _create_user(session, "zola")
        resolved = resolve_shipping_address(session, user_id=user.id, address=ADDRESS)

        assert resolved.address_id is None
        assert "Hamra Street" in resolved.text
        assert list_user_addresses(session, user.id) == []


def test_saved_inline_address_is_part_of_callers_transaction(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "resolve_save.db")
    with database.session() as session:
        user = _create_user(session, "bisi")
        resolved = resolve_shipping_address(session, user_id=user.id, address=ADDRESS, save_address=True)
        assert resolved.address_id is not None

        session.rollback()
        assert list_user_addresses(session, user.id) == []


def test_format_address_skips_empty_parts() -> None:
    assert format_address({"street_address": "1 Main", "city": "Byblos", "state": "", "country": "Lebanon"}) == (
        "1 Main, Byblos, Lebanon"
    )
    assert format_address(None) == ""
