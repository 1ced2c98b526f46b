"""FastAPI entrypoint for the Africa Market storefront API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from africa_market.api.v1.api import api_router
from africa_market.core.config import settings
from africa_market.core.errors import MarketError, OrderCreationError
from africa_market.db import session as db_session
from africa_market.db.base import Base
from africa_market.db.migrations import ensure_legacy_columns
from africa_market.db.seed import ensure_admin_user
from africa_market.services.notifications import get_notifier, shutdown_notifier

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api/v1")


def _envelope(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


@app.exception_handler(MarketError)
async def market_error_handler(_request: Request, exc: MarketError) -> JSONResponse:
    if isinstance(exc, OrderCreationError) and not settings.is_production:
        return _envelope(exc.status_code, exc.message, error=str(exc.__cause__ or exc))
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    response = _envelope(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'Invalid request')}" if field else first.get("msg", "Invalid request")
    return _envelope(400, message)


@app.on_event("startup")
def startup() -> None:
    engine = db_session.database.open()
    logger.info("[BOOTSTRAP] Starting %s (%s) on %s", settings.app_name, settings.app_env, db_session.database.backend)
    Base.metadata.create_all(bind=engine)
    ensure_legacy_columns(engine)
    with db_session.database.session() as session:
        try:
            admin = ensure_admin_user(session)
            logger.info("[BOOTSTRAP] admin account present: %s", "yes" if admin is not None else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin seed failed; continuing startup.")
    get_notifier()


@app.on_event("shutdown")
def shutdown() -> None:
    shutdown_notifier()
    db_session.database.close()


@app.get("/")
def root() -> dict[str, str]:
    return {
        "status": "ok",
        "name": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
