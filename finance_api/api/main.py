"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.engine import Engine
from starlette.responses import Response

from finance_api.api.errors import register_exception_handlers
from finance_api.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_api.api.v1 import accounts, auth, categories, envelopes, transactions
from finance_api.infrastructure.database.session import create_db_engine, create_session_factory, init_database
from finance_api.infrastructure.observability.logging import setup_logging
from finance_api.config import Settings, settings


def create_app(app_settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Create and configure FastAPI application

    The engine is built here (or injected) and stored on ``app.state``;
    startup refuses to serve if the database cannot be reached.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.service_name)
    engine = engine or create_db_engine(app_settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_database(engine, create_tables=app_settings.create_tables)
        logging.info("Service started", extra={"service": app_settings.service_name})
        yield
        engine.dispose()

    app = FastAPI(
        title="Finance Tracker API",
        description="Transactions, installments, envelopes, accounts and categories",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(envelopes.router, prefix="/v1", tags=["envelopes"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(categories.router, prefix="/v1", tags=["categories"])

    return app


app = create_app()
