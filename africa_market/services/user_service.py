"""User service operations."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from africa_market.core.errors import ConflictError, NotFoundError, ValidationError
from africa_market.models.user import USER_ROLES, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH: int = 6


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email).limit(1))


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username).limit(1))


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def ensure_password_strength(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def create_user(
    db: Session,
    username: str,
    email: str,
    hashed_password: str,
    role: str = "user",
) -> User:
    if role not in USER_ROLES:
        raise ValidationError("Invalid role")
    if get_user_by_email(db=db, email=email) is not None:
        raise ConflictError("User with this email already exists")
    if get_user_by_username(db=db, username=username) is not None:
        raise ConflictError("Username already taken")

    user = User(username=username, email=email, password_hash=hashed_password, role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[AUTH] Created %s account user_id=%s", role, user.id)
    return user


def list_customers(db: Session) -> list[User]:
    """Return regular (non-admin) accounts, newest first."""
    return list(db.scalars(select(User).where(User.role == "user").order_by(User.created_at.desc(), User.id.desc())).all())


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_password(db: Session, user_id: int, hashed_password: str) -> User:
    user = get_user_or_404(db, user_id)
    user.password_hash = hashed_password
    db.commit()
    db.refresh(user)
    return user


def toggle_active(db: Session, user_id: int) -> User:
    user = get_user_or_404(db, user_id)
    user.is_active = not user.is_active
    db.commit()
    db.refresh(user)
    logger.info("[AUTH] user_id=%s %s", user.id, "enabled" if user.is_active else "disabled")
    return user
