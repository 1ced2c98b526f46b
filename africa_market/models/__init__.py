"""Application models package."""

from africa_market.models.address import Address
from africa_market.models.inquiry import Booking, Contact
from africa_market.models.order import ORDER_STATUSES, Order, OrderItem
from africa_market.models.product import Product
from africa_market.models.user import USER_ROLES, User

__all__ = [
    "User", "USER_ROLES", "Address", "Product", "Order", "OrderItem", "ORDER_STATUSES", "Contact", "Booking",
]
