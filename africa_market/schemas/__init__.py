"""Schema exports."""

from africa_market.schemas.address import AddressCreate, AddressRead, AddressUpdate
from africa_market.schemas.auth import AuthResponse, LoginRequest, PasswordReset, RegisterRequest, UserRead
from africa_market.schemas.inquiry import BookingCreate, BookingRead, ContactCreate, ContactRead
from africa_market.schemas.order import (
    CheckoutAddress,
    CheckoutItem,
    CheckoutRequest,
    OrderEnvelope,
    OrderItemRead,
    OrderListEnvelope,
    OrderRead,
    StatusUpdate,
)
from africa_market.schemas.product import ProductCreate, ProductRead, ProductUpdate

__all__ = [
    "AddressCreate",
    "AddressRead",
    "AddressUpdate",
    "AuthResponse",
    "LoginRequest",
    "PasswordReset",
    "RegisterRequest",
    "UserRead",
    "BookingCreate",
    "BookingRead",
    "ContactCreate",
    "ContactRead",
    "CheckoutAddress",
    "CheckoutItem",
    "CheckoutRequest",
    "OrderEnvelope",
    "OrderItemRead",
    "OrderListEnvelope",
    "OrderRead",
    "StatusUpdate",
    "ProductCreate",
    "ProductRead",
    "ProductUpdate",
]
