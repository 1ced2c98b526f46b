"""Database engine and session management."""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from africa_market.core.config import Settings, settings

logger = logging.getLogger(__name__)

BACKEND_DRIVERS: dict[str, str] = {
    "postgres": "postgresql+psycopg2",
    "postgresql": "postgresql+psycopg2",
    "mysql": "mysql+pymysql",
}
DEFAULT_PORTS: dict[str, int] = {"postgresql+psycopg2": 5432, "mysql+pymysql": 3306}


def resolve_database_url(config: Settings) -> str:
    """Pick the database URL from explicit URL, backend settings, or local SQLite."""
    if config.database_url:
        return config.database_url

    if not config.db_type and not config.db_host:
        return config.sqlite_fallback_url

    backend = config.db_type.strip().lower()
    if not backend:
        backend = "postgres" if config.db_port == 5432 else "mysql"
    drivername = BACKEND_DRIVERS.get(backend)
    if drivername is None:
        raise ValueError(f"Unsupported DB_TYPE: {config.db_type}")

    url = URL.create(
        drivername=drivername,
        username=config.db_user or None,
        password=config.db_password or None,
        host=config.db_host or "localhost",
        port=config.db_port or DEFAULT_PORTS[drivername],
        database=config.db_name,
    )
    return url.render_as_string(hide_password=False)


def engine_options(url: str, config: Settings = settings) -> dict[str, Any]:
    """Return backend specific create_engine keyword arguments."""
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    if backend == "mysql":
        return {"pool_size": 10, "pool_recycle": 3600, "pool_pre_ping": True}
    if backend == "postgresql":
        options: dict[str, Any] = {"pool_size": 10, "pool_pre_ping": True}
        if config.is_production:
            options["connect_args"] = {"sslmode": "require"}
        return options
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one configured backend."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine: Engine | None = None
        self.session_factory: sessionmaker[Session] | None = None

    @property
    def backend(self) -> str:
        return make_url(self.url).get_backend_name()

    def open(self) -> Engine:
        if self.engine is not None:
            return self.engine
        engine = create_engine(self.url, **engine_options(self.url))
        if self.backend == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self.engine = engine
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("[DB] Opened %s database", self.backend)
        return engine

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("[DB] Closed %s database", self.backend)

    def session(self) -> Session:
        if self.session_factory is None:
            self.open()
        return self.session_factory()


database: Database = Database(resolve_database_url(settings))


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and ensure proper cleanup."""
    db: Session = database.session()
    try:
        yield db
    finally:
        db.close()
