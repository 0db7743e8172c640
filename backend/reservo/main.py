"""FastAPI application factories for the auth and reservations services.

Run with:
    uvicorn --factory reservo.main:create_auth_app
    uvicorn --factory reservo.main:create_reservations_app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient
from pymongo.database import Database

from reservo.api import auth, health, reservations, users
from reservo.config import (
    AuthSettings,
    CommonSettings,
    ReservationsSettings,
    get_auth_settings,
    get_reservations_settings,
)
from reservo.core.logging import setup_logging
from reservo.core.security import PasswordHasher
from reservo.database.ensure_indexes import ensure_indexes
from reservo.database.mongo import create_client, get_database
from reservo.middleware.exception_handlers import register_exception_handlers
from reservo.middleware.request_logging import RequestLoggingMiddleware
from reservo.rpc import RpcClient
from reservo.services.token_service import TokenService

logger = logging.getLogger(__name__)


def _build_app(settings: CommonSettings, db: Optional[Database], lifespan) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Trace middleware for request logging and correlation
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    return app


@asynccontextmanager
async def _mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database unless one was injected, then run service startup hooks."""
    settings: CommonSettings = app.state.settings
    client: Optional[MongoClient] = None
    if app.state.db is None:
        client = create_client(settings)
        app.state.db = get_database(client, settings)

    for hook in getattr(app.state, "startup_hooks", []):
        hook(app.state.db)

    try:
        yield
    finally:
        if client is not None:
            client.close()
            logger.info("MongoDB client closed")


def create_auth_app(
    settings: Optional[AuthSettings] = None,
    db: Optional[Database] = None,
) -> FastAPI:
    """Auth service: registration, login and the identity behind every token."""
    settings = settings or get_auth_settings()
    setup_logging(settings.ENV)

    app = _build_app(settings, db, _mongo_lifespan)
    app.state.password_hasher = PasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.startup_hooks = [ensure_indexes]

    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    return app


def create_reservations_app(
    settings: Optional[ReservationsSettings] = None,
    db: Optional[Database] = None,
    auth_client: Optional[RpcClient] = None,
    payments_client: Optional[RpcClient] = None,
) -> FastAPI:
    """Reservations service: reservation CRUD behind the delegated auth guard."""
    settings = settings or get_reservations_settings()
    setup_logging(settings.ENV)

    if auth_client is None or payments_client is None:
        from reservo.celery_app import celery_app

        auth_client = auth_client or RpcClient(
            celery_app, service="auth", timeout=settings.RPC_TIMEOUT_SECONDS
        )
        payments_client = payments_client or RpcClient(
            celery_app, service="payments", timeout=settings.RPC_TIMEOUT_SECONDS
        )

    app = _build_app(settings, db, _mongo_lifespan)
    app.state.auth_client = auth_client
    app.state.payments_client = payments_client

    app.include_router(reservations.router, prefix="/api")
    return app
