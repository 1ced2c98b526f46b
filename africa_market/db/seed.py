"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from africa_market.core.config import Settings, settings
from africa_market.core.security import get_password_hash
from africa_market.models.user import User
from africa_market.services.user_service import create_user, get_user_by_email, get_user_by_username

logger = logging.getLogger(__name__)


def ensure_admin_user(session: Session, config: Settings = settings) -> User | None:
    """Create the configured admin account when ADMIN_EMAIL and ADMIN_PASSWORD are set."""
    if not config.admin_email.strip() or not config.admin_password:
        logger.info("[BOOTSTRAP] ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping admin seed")
        return None

    email = config.admin_email.strip().lower()
    existing_user = get_user_by_email(db=session, email=email)
    if existing_user is not None:
        return existing_user

    username = config.admin_username
    if get_user_by_username(db=session, username=username) is not None:
        username = email.split("@")[0]

    user = create_user(
        db=session,
        username=username,
        email=email,
        hashed_password=get_password_hash(config.admin_password),
        role="admin",
    )
    logger.info("[BOOTSTRAP] Created admin account %s", user.email)
    return user
