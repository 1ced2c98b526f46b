"""Order status machine tests."""

from decimal import Decimal
from pathlib import Path

import pytest

from africa_market.core.errors import NotFoundError, ValidationError
from africa_market.db.base import Base
from africa_market.db.session import Database
from africa_market.models.order import Order, OrderItem
from africa_market.models.product import Product
from africa_market.models.user import User
from africa_market.services.notifications import NotificationResult
from africa_market.services.order_status import InvalidTransitionError, can_transition, update_order_status


class RecordingNotifier:
    def __init__(self) -> None:
        self.invoices: list[int] = []
        self.deliveries: list[int] = []

    def send_invoice(self, order, user, items) -> NotificationResult:
        self.invoices.append(order.id)
        return NotificationResult(success=True, message_id="<invoice@test>")

    def send_delivery_confirmation(self, order, user, items) -> NotificationResult:
        self.deliveries.append(order.id)
        return NotificationResult(success=True, message_id="<delivered@test>")


class ExplodingNotifier(RecordingNotifier):
    def send_delivery_confirmation(self, order, user, items) -> NotificationResult:
        raise RuntimeError("smtp relay unreachable")


def _build_database(db_file: Path) -> Database:
    database = Database(f"sqlite:///{db_file}")
    Base.metadata.create_all(bind=database.open())
    return database


def _create_order(database: Database, status: str) -> int:
    with database.session() as session:
        user = User(username="buyer", email="buyer@example.com", password_hash="x", role="user")
        product = Product(name="Kente Scarf", price=Decimal("12.00"))
        session.add_all([user, product])
        session.flush()
        order = Order(
            user_id=user.id,
            total_amount=Decimal("12.00"),
            shipping_cost=Decimal("5.00"),
            shipping_address="Beirut, Lebanon",
            status=status,
        )
        session.add(order)
        session.flush()
        session.add(OrderItem(order_id=order.id, product_id=product.id, quantity=1, price=Decimal("12.00")))
        session.commit()
        return order.id


def test_delivered_notifies_exactly_once(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_once.db")
    order_id = _create_order(database, "delivering")
    notifier = RecordingNotifier()

    with database.session() as session:
        order = update_order_status(session, order_id=order_id, new_status="delivered", notifier=notifier)
        assert order.status == "delivered"
        assert notifier.deliveries == [order_id]

    with database.session() as session:
        again = update_order_status(session, order_id=order_id, new_status="delivered", notifier=notifier)
        assert again.status == "delivered"

    assert notifier.deliveries == [order_id]


@pytest.mark.parametrize("status", ["", "Delivered", "shipping", "refunded"])
def test_unknown_status_is_rejected_and_stored_status_kept(tmp_path: Path, status: str) -> None:
    database = _build_database(tmp_path / "status_whitelist.db")
    order_id = _create_order(database, "pending")

    with database.session() as session:
        with pytest.raises(ValidationError, match="Invalid status"):
            update_order_status(session, order_id=order_id, new_status=status, notifier=RecordingNotifier())

    with database.session() as session:
        assert session.get(Order, order_id).status == "pending"


def test_missing_order_is_not_found(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_missing.db")

    with database.session() as session:
        with pytest.raises(NotFoundError):
            update_order_status(session, order_id=42, new_status="shipped", notifier=RecordingNotifier())


def test_strict_graph_rejects_moves_out_of_terminal_states(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_strict.db")
    order_id = _create_order(database, "delivered")

    with database.session() as session:
        with pytest.raises(InvalidTransitionError):
            update_order_status(session, order_id=order_id, new_status="pending", notifier=RecordingNotifier(), strict=True)

    with database.session() as session:
        assert session.get(Order, order_id).status == "delivered"


def test_relaxed_mode_accepts_any_whitelisted_target(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_relaxed.db")
    order_id = _create_order(database, "cancelled")

    with database.session() as session:
        order = update_order_status(
            session, order_id=order_id, new_status="processing", notifier=RecordingNotifier(), strict=False
        )
        assert order.status == "processing"


def test_notifier_failure_does_not_undo_status_change(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_notifier_failure.db")
    order_id = _create_order(database, "shipped")

    with database.session() as session:
        order = update_order_status(session, order_id=order_id, new_status="delivered", notifier=ExplodingNotifier())
        assert order.status == "delivered"

    with database.session() as session:
        assert session.get(Order, order_id).status == "delivered"


def test_non_delivery_moves_do_not_notify(tmp_path: Path) -> None:
    database = _build_database(tmp_path / "status_quiet.db")
    order_id = _create_order(database, "pending")
    notifier = RecordingNotifier()

    with database.session() as session:
        update_order_status(session, order_id=order_id, new_status="processing", notifier=notifier)
        update_order_status(session, order_id=order_id, new_status="cancelled", notifier=notifier)

    assert notifier.deliveries == []


def test_transition_graph() -> None:
    assert can_transition("pending", "shipped")
    assert can_transition("processing", "cancelled")
    assert can_transition("delivering", "delivering")
    assert not can_transition("delivering", "pending")
    assert not can_transition("cancelled", "delivered")
    assert can_transition("cancelled", "delivered", strict=False)
    assert not can_transition("pending", "archived", strict=False)
