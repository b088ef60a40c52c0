"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from shopledger.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="ShopLedger starting up", timestamp=start_time.isoformat())

    from shopledger.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="ShopLedger shutting down gracefully")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure all middleware in correct order."""
    from shopledger.middleware.logging import RequestIDMiddleware
    from shopledger.middleware.sentry import SentryContextMiddleware

    # Last added = first executed: RequestID, then Session, then Sentry context
    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=14 * 24 * 60 * 60,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from shopledger.api.auth import router as auth_router
    from shopledger.api.bills import router as bills_router
    from shopledger.api.customers import router as customers_router
    from shopledger.api.export_bills import router as export_router
    from shopledger.api.health import router as health_router
    from shopledger.api.invoices import router as invoices_router
    from shopledger.api.payments import router as payments_router
    from shopledger.api.reports import router as reports_router
    from shopledger.api.transactions import router as transactions_router
    from shopledger.api.wholesalers import router as wholesalers_router

    app.include_router(health_router)
    app.include_router(auth_router)

    # /bills/export before /bills/{bill_id}
    app.include_router(export_router)
    app.include_router(bills_router)

    app.include_router(customers_router)
    app.include_router(wholesalers_router)
    app.include_router(invoices_router)
    app.include_router(payments_router)
    app.include_router(transactions_router)
    app.include_router(reports_router)


def create_app() -> FastAPI:
    """Application factory for ShopLedger."""
    app = FastAPI(
        title="ShopLedger API",
        description="Bills, dues and payments ledger for small shops",
        version="0.1.0",
        lifespan=lifespan,
    )

    from shopledger.core.exception_handlers import register_exception_handlers
    from shopledger.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")

    _setup_middleware(app, environment, session_secret_key)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "shopledger.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
