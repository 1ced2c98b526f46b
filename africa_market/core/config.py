"""Application configuration."""

from decimal import Decimal
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Africa Market API"
    app_version: str = "1.0.0"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"

    database_url: str = getenv("DATABASE_URL", "")
    sqlite_fallback_url: str = "sqlite:///./africa_market.db"
    db_type: str = getenv("DB_TYPE", "")
    db_host: str = getenv("DB_HOST", "")
    db_port: int = int(getenv("DB_PORT", "0"))
    db_user: str = getenv("DB_USER", "")
    db_password: str = getenv("DB_PASSWORD", "")
    db_name: str = getenv("DB_NAME", "africa_db")

    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 7)))
    auth_cookie_name: str = getenv("AUTH_COOKIE_NAME", "token")
    frontend_url: str = getenv("FRONTEND_URL", "http://localhost:3000")

    admin_username: str = getenv("ADMIN_USERNAME", "admin")
    admin_email: str = getenv("ADMIN_EMAIL", "")
    admin_password: str = getenv("ADMIN_PASSWORD", "")

    default_shipping_cost: Decimal = Decimal(getenv("DEFAULT_SHIPPING_COST", "5.00"))
    default_country: str = getenv("DEFAULT_COUNTRY", "Lebanon")
    order_initial_status: str = getenv("ORDER_INITIAL_STATUS", "delivering")
    strict_status_transitions: bool = getenv("ORDER_STRICT_TRANSITIONS", "1") == "1"

    mail_enabled: bool = getenv("MAIL_ENABLED", "0") == "1"
    smtp_host: str = getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(getenv("SMTP_PORT", "465"))
    smtp_user: str = getenv("SMTP_USER", "")
    smtp_password: str = getenv("SMTP_PASSWORD", "")
    mail_from_name: str = getenv("MAIL_FROM_NAME", "Africa Market")
    mail_timeout_seconds: float = float(getenv("MAIL_TIMEOUT_SECONDS", "30"))

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings: Settings = Settings()
