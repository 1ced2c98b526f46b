"""Best-effort order emails: invoice on checkout, confirmation on delivery."""

from __future__ import annotations

import logging
import smtplib
import ssl
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from africa_market.core.config import Settings, settings
from africa_market.core.errors import NotificationError
from africa_market.models.order import Order, OrderItem
from africa_market.models.user import User
from africa_market.services.pricing import to_cents, to_decimal

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class Notifier(Protocol):
    def send_invoice(self, order: Order, user: User, items: Sequence[OrderItem]) -> NotificationResult: ...

    def send_delivery_confirmation(self, order: Order, user: User, items: Sequence[OrderItem]) -> NotificationResult: ...


def _money(value: Any) -> str:
    return f"{to_cents(to_decimal(value)):.2f}"


def build_template_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["money"] = _money
    return env


def _item_context(items: Sequence[OrderItem]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for item in items:
        name = item.product.name if item.product is not None else item.product_name
        rows.append(
            {
                "name": name or "Product",
                "quantity": item.quantity,
                "price": item.price,
                "line_total": item.price * item.quantity,
            }
        )
    return rows


class MailNotifier:
    """SMTP notifier; every send is bounded by ``mail_timeout_seconds`` and never raises."""

    def __init__(self, config: Settings = settings, executor: ThreadPoolExecutor | None = None) -> None:
        self.config = config
        self.templates = build_template_environment()
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="mail")

    @property
    def sender(self) -> str:
        return formataddr((self.config.mail_from_name, self.config.smtp_user))

    def render(self, template_name: str, **context: Any) -> str:
        return self.templates.get_template(template_name).render(shop_name=self.config.mail_from_name, **context)

    def build_message(self, *, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        if to:
            message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self.config.smtp_host or None)
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def _transmit(self, message: EmailMessage) -> str:
        timeout = self.config.mail_timeout_seconds
        if self.config.smtp_port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self.config.smtp_host, self.config.smtp_port, timeout=timeout, context=context) as server:
                server.login(self.config.smtp_user, self.config.smtp_password)
                server.send_message(message)
        else:
            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=timeout) as server:
                server.starttls(context=ssl.create_default_context())
                server.login(self.config.smtp_user, self.config.smtp_password)
                server.send_message(message)
        return str(message["Message-ID"])

    def deliver(self, message: EmailMessage, *, kind: str) -> NotificationResult:
        """Send with a hard time budget and convert every failure into a result."""
        try:
            if not self.config.mail_enabled:
                raise NotificationError("Mail delivery is disabled")
            if not message["To"]:
                raise NotificationError("Recipient has no email address")
            future = self._executor.submit(self._transmit, message)
            try:
                message_id = future.result(timeout=self.config.mail_timeout_seconds)
            except FutureTimeoutError as exc:
                future.cancel()
                raise NotificationError(
                    f"Email send timeout after {self.config.mail_timeout_seconds:g} seconds"
                ) from exc
        except NotificationError as exc:
            logger.warning("[MAIL] %s email not sent: %s", kind, exc.message)
            return NotificationResult(success=False, error=exc.message)
        except (smtplib.SMTPException, OSError, RuntimeError) as exc:
            logger.warning("[MAIL] %s email failed: %s", kind, exc)
            return NotificationResult(success=False, error=str(exc))
        logger.info("[MAIL] %s email sent: %s", kind, message_id)
        return NotificationResult(success=True, message_id=message_id)

    def close(self) -> None:
        """Stop accepting sends; an in-flight send finishes on its own thread."""
        self._executor.shutdown(wait=False)

    def send_invoice(self, order: Order, user: User, items: Sequence[OrderItem]) -> NotificationResult:
        html = self.render(
            "invoice.html",
            order=order,
            user=user,
            items=_item_context(items),
            subtotal=order.total_amount,
            shipping=order.shipping_cost,
            total=order.total_amount + order.shipping_cost,
        )
        message = self.build_message(
            to=user.email,
            subject=f"Order Invoice #{order.id} - Status: {order.status.capitalize()}",
            html=html,
        )
        return self.deliver(message, kind="Invoice")

    def send_delivery_confirmation(self, order: Order, user: User, items: Sequence[OrderItem]) -> NotificationResult:
        html = self.render(
            "delivered.html",
            order=order,
            user=user,
            items=_item_context(items),
            total=order.total_amount + order.shipping_cost,
            delivered_at=datetime.now(timezone.utc),
        )
        message = self.build_message(to=user.email, subject=f"Order #{order.id} Has Been Delivered", html=html)
        return self.deliver(message, kind="Delivery")


_notifier: MailNotifier | None = None
_notifier_lock = threading.Lock()


def get_notifier() -> Notifier:
    """FastAPI dependency returning the process-wide mail notifier."""
    global _notifier
    with _notifier_lock:
        if _notifier is None:
            _notifier = MailNotifier(settings)
        return _notifier


def shutdown_notifier() -> None:
    """Release the process-wide notifier and its worker threads."""
    global _notifier
    with _notifier_lock:
        if _notifier is not None:
            _notifier.close()
            _notifier = None


def dispatch(send, order: Order, user: User, items: Sequence[OrderItem]) -> NotificationResult:
    """Invoke a notifier method; anything it raises is logged and turned into a failed result."""
    try:
        return send(order, user, items)
    except Exception as exc:  # noqa: BLE001
        logger.exception("[MAIL] Notifier raised for order_id=%s", order.id)
        return NotificationResult(success=False, error=str(exc))
