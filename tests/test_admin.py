"""Back-office endpoint tests: catalog, users, orders, contacts and bookings."""

from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient

from africa_market.core.security import get_password_hash
from africa_market.db import session as db_session
from africa_market.db.session import Database
from africa_market.main import app
from africa_market.models.user import User
from africa_market.services.notifications import NotificationResult, get_notifier


class RecordingNotifier:
    def __init__(self) -> None:
        self.invoices: list[int] = []
        self.deliveries: list[int] = []

    def send_invoice(self, order, user, items) -> NotificationResult:
        self.invoices.append(order.id)
        return NotificationResult(success=True)

    def send_delivery_confirmation(self, order, user, items) -> NotificationResult:
        self.deliveries.append(order.id)
        return NotificationResult(success=True)


def _use_database(db_file: Path, monkeypatch) -> Database:
    database = Database(f"sqlite:///{db_file}")
    monkeypatch.setattr(db_session, "database", database)
    return database


def _create_admin(database: Database) -> None:
    with database.session() as session:
        session.add(
            User(
                username="admin",
                email="admin@africamarket.test",
                password_hash=get_password_hash("secret123"),
                role="admin",
            )
        )
        session.commit()


def _login(client: TestClient, email: str, password: str = "secret123") -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _register(client: TestClient, username: str) -> dict[str, str]:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_admin_routes_reject_regular_users(tmp_path: Path, monkeypatch) -> None:
    _use_database(tmp_path / "admin_guard.db", monkeypatch)

    with TestClient(app) as client:
        headers = _register(client, "shopper")
        response = client.get("/api/v1/admin/orders", headers=headers)
        anonymous = client.get("/api/v1/admin/orders")

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Access denied. Admin privileges required."}
    assert anonymous.status_code == 401


def test_admin_product_crud(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_products.db", monkeypatch)

    with TestClient(app) as client:
        _create_admin(database)
        headers = _login(client, "admin@africamarket.test")

        created = client.post(
            "/api/v1/admin/products",
            json={"name": "  Baobab Powder ", "price": "8.75", "description": "Organic"},
            headers=headers,
        )
        product_id = created.json()["id"]
        zero_price = client.post("/api/v1/admin/products", json={"name": "Free", "price": 0}, headers=headers)
        no_price = client.post("/api/v1/admin/products", json={"name": "Mystery"}, headers=headers)
        updated = client.put(f"/api/v1/admin/products/{product_id}", json={"price": "9.25"}, headers=headers)
        public = client.get("/api/v1/products")
        deleted = client.delete(f"/api/v1/admin/products/{product_id}", headers=headers)
        deleted_again = client.delete(f"/api/v1/admin/products/{product_id}", headers=headers)

    assert created.status_code == 201
    assert created.json()["name"] == "Baobab Powder"
    assert zero_price.status_code == 400
    assert zero_price.json()["message"] == "Price must be greater than 0"
    assert no_price.status_code == 400
    assert no_price.json()["message"] == "Valid price is required"
    assert updated.status_code == 200
    assert updated.json()["name"] == "Baobab Powder"
    assert Decimal(updated.json()["price"]) == Decimal("9.25")
    assert [product["id"] for product in public.json()] == [product_id]
    assert deleted.status_code == 200
    assert deleted_again.status_code == 404


def test_admin_user_management(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_users.db", monkeypatch)

    with TestClient(app) as client:
        _create_admin(database)
        _register(client, "customer")
        headers = _login(client, "admin@africamarket.test")

        users = client.get("/api/v1/admin/users", headers=headers).json()
        customer_id = users[0]["id"]
        short = client.put(f"/api/v1/admin/users/{customer_id}/password", json={"new_password": "abc"}, headers=headers)
        reset = client.put(
            f"/api/v1/admin/users/{customer_id}/password", json={"new_password": "fresh-pass"}, headers=headers
        )
        relogin = client.post("/api/v1/auth/login", json={"email": "customer@example.com", "password": "fresh-pass"})
        client.cookies.clear()
        toggled = client.put(f"/api/v1/admin/users/{customer_id}/toggle-active", headers=headers)
        disabled_login = client.post(
            "/api/v1/auth/login", json={"email": "customer@example.com", "password": "fresh-pass"}
        )
        missing = client.get("/api/v1/admin/users/9999", headers=headers)

    assert [user["username"] for user in users] == ["customer"]
    assert short.status_code == 400
    assert reset.status_code == 200
    assert relogin.status_code == 200
    assert toggled.json()["is_active"] is False
    assert disabled_login.status_code == 401
    assert disabled_login.json()["message"] == "User account is disabled"
    assert missing.status_code == 404


def test_disabled_user_token_stops_working(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_disable.db", monkeypatch)

    with TestClient(app) as client:
        _create_admin(database)
        customer = _register(client, "customer")
        admin = _login(client, "admin@africamarket.test")
        customer_id = client.get("/api/v1/auth/me", headers=customer).json()["id"]

        client.put(f"/api/v1/admin/users/{customer_id}/toggle-active", headers=admin)
        response = client.get("/api/v1/auth/me", headers=customer)

    assert response.status_code == 401
    assert response.json()["message"] == "User account is disabled"


def test_admin_order_status_flow(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_orders.db", monkeypatch)
    notifier = RecordingNotifier()
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        with TestClient(app) as client:
            _create_admin(database)
            admin = _login(client, "admin@africamarket.test")
            product_id = client.post(
                "/api/v1/admin/products", json={"name": "Kente Scarf", "price": "12.00"}, headers=admin
            ).json()["id"]
            customer = _register(client, "customer")
            order_id = client.post(
                "/api/v1/users/checkout",
                json={
                    "items": [{"id": product_id, "quantity": 1}],
                    "address": {"full_name": "C", "street_address": "1 Road", "city": "Beirut"},
                },
                headers=customer,
            ).json()["order"]["id"]

            listing = client.get("/api/v1/admin/orders", headers=admin)
            invalid = client.put(f"/api/v1/admin/orders/{order_id}/status", json={"status": "lost"}, headers=admin)
            missing = client.put("/api/v1/admin/orders/9999/status", json={"status": "delivered"}, headers=admin)
            delivered = client.put(
                f"/api/v1/admin/orders/{order_id}/status", json={"status": "delivered"}, headers=admin
            )
            repeated = client.put(
                f"/api/v1/admin/orders/{order_id}/status", json={"status": "delivered"}, headers=admin
            )
            backwards = client.put(
                f"/api/v1/admin/orders/{order_id}/status", json={"status": "pending"}, headers=admin
            )
            detail = client.get(f"/api/v1/admin/orders/{order_id}", headers=admin)
    finally:
        app.dependency_overrides.clear()

    orders = listing.json()["orders"]
    assert orders[0]["email"] == "customer@example.com"
    assert orders[0]["items"][0]["product_name"] == "Kente Scarf"
    assert invalid.status_code == 400
    assert invalid.json()["message"].startswith("Invalid status")
    assert missing.status_code == 404
    assert delivered.status_code == 200
    assert delivered.json()["order"]["status"] == "delivered"
    assert repeated.status_code == 200
    assert backwards.status_code == 400
    assert detail.json()["order"]["status"] == "delivered"
    assert notifier.deliveries == [order_id]
    assert notifier.invoices == [order_id]


def test_contacts_and_bookings(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_inquiries.db", monkeypatch)

    with TestClient(app) as client:
        _create_admin(database)
        contact = client.post(
            "/api/v1/contacts",
            json={"name": "Ada", "email": "ada@example.com", "message": "Do you ship to Sidon?"},
        )
        booking = client.post(
            "/api/v1/bookings",
            json={
                "name": "Ada",
                "phone": "+961 3 123456",
                "orderType": "Catering",
                "date": "2026-11-02",
                "time": "14:30",
            },
        )
        blank = client.post("/api/v1/contacts", json={"name": " ", "email": "a@b.c", "message": "hi"})
        admin = _login(client, "admin@africamarket.test")
        contacts = client.get("/api/v1/admin/contacts", headers=admin)
        bookings = client.get("/api/v1/admin/bookings", headers=admin)
        removed = client.delete(f"/api/v1/admin/bookings/{booking.json()['id']}", headers=admin)
        removed_again = client.delete(f"/api/v1/admin/bookings/{booking.json()['id']}", headers=admin)
        contact_removed = client.delete(f"/api/v1/admin/contacts/{contact.json()['id']}", headers=admin)
        contact_missing = client.delete("/api/v1/admin/contacts/9999", headers=admin)

    assert contact.status_code == 201
    assert booking.status_code == 201
    assert booking.json()["orderType"] == "Catering"
    assert booking.json()["date"] == "2026-11-02"
    assert blank.status_code == 400
    assert [row["message"] for row in contacts.json()] == ["Do you ship to Sidon?"]
    assert bookings.json()[0]["time"] == "14:30:00"
    assert removed.status_code == 200
    assert removed_again.status_code == 404
    assert contact_removed.status_code == 200
    assert contact_missing.status_code == 404


def test_admin_reads_single_product_and_rejects_out_of_range_price(tmp_path: Path, monkeypatch) -> None:
    database = _use_database(tmp_path / "admin_product_read.db", monkeypatch)

    with TestClient(app) as client:
        _create_admin(database)
        headers = _login(client, "admin@africamarket.test")
        product_id = client.post(
            "/api/v1/admin/products", json={"name": "Moringa Tea", "price": "4.20"}, headers=headers
        ).json()["id"]

        found = client.get(f"/api/v1/admin/products/{product_id}", headers=headers)
        missing = client.get("/api/v1/admin/products/9999", headers=headers)
        too_expensive = client.post(
            "/api/v1/admin/products", json={"name": "Gold", "price": "100000000.00"}, headers=headers
        )

    assert found.status_code == 200
    assert found.json()["name"] == "Moringa Tea"
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Product not found"}
    assert too_expensive.status_code == 400
    assert too_expensive.json()["message"] == "Price is too large"
