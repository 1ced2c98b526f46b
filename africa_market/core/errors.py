"""Domain error taxonomy shared by services and API handlers."""

from __future__ import annotations


class MarketError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MarketError):
    """Malformed or missing input."""

    status_code = 400


class ConflictError(ValidationError):
    """Uniqueness clash such as an already registered email."""


class AuthorizationError(MarketError):
    """Caller is not allowed to touch the resource."""

    status_code = 403


class NotFoundError(MarketError):
    """Referenced entity does not exist or is not visible to the caller."""

    status_code = 404


class OrderCreationError(MarketError):
    """Transactional order write failed and was rolled back."""

    status_code = 500


class NotificationError(MarketError):
    """Outbound notification failed. Logged only, never rendered."""

    status_code = 500
