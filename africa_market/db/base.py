"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from africa_market.models import address as _address  # noqa: E402,F401
from africa_market.models import inquiry as _inquiry  # noqa: E402,F401
from africa_market.models import order as _order  # noqa: E402,F401
from africa_market.models import product as _product  # noqa: E402,F401
from africa_market.models import user as _user  # noqa: E402,F401
