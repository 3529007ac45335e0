"""Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the {"errors": [...]} body
    - Every request leaves one access log line (AccessLogMiddleware)
    - DatabaseSessionManager built in the lifespan and kept on app.state
    - With DATABASE_MIN_VERSION set, startup fails unless that Alembic
      revision is applied
    - Swagger UI at /docs documents request, response and error models
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ledger.api.error_handlers import register_error_handlers
from ledger.api.routes import accounts, health, transactions
from ledger.config import get_settings
from ledger.infrastructure.database import DatabaseSessionManager
from ledger.infrastructure.observability import (
    AccessLogMiddleware, setup_logging,
)
from ledger.migrate import ensure_schema_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        application_name=settings.service_name,
        ssl_root_cert=settings.database_ssl_root_cert,
    )
    if settings.database_min_version:
        await ensure_schema_version(
            app.state.db_manager.engine,
            settings.database_min_version,
            settings.database_migration_table,
        )
    logger.info("Ledger API started")
    yield
    logger.info("Ledger API shutting down")
    await app.state.db_manager.dispose()


app = FastAPI(
    title="Ledger API", version="1.0.0", lifespan=lifespan,
    description="Idempotent accounts and append-only transactions.",
)

# Routes
app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(transactions.router)

register_error_handlers(app)
app.add_middleware(AccessLogMiddleware)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "ledger.main:app", host=settings.host, port=settings.port,
        log_config=None,
    )
