"""
Base Celery tasks owning the per-process resources of each worker.

A worker process builds its settings, database handle and service once, on
first use, and reuses them for every task it runs.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from celery import Task
from pymongo import MongoClient
from pymongo.database import Database

from reservo.celery_app import NOTIFICATIONS_QUEUE, celery_app
from reservo.config import (
    get_auth_settings,
    get_notifications_settings,
    get_payments_settings,
)
from reservo.core.security import PasswordHasher
from reservo.database.mongo import create_client, get_database
from reservo.repositories.user import UserRepository
from reservo.rpc import RpcClient
from reservo.services.auth_service import AuthService
from reservo.services.notification_service import NotificationService
from reservo.services.payment_service import PaymentService
from reservo.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AuthTask(Task):
    """Base task for the auth worker with a lazily connected database."""

    abstract = True

    def __init__(self) -> None:
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None
        self._auth_service: Optional[AuthService] = None

    @property
    def db(self) -> Database:
        if self._db is None:
            settings = get_auth_settings()
            self._client = create_client(settings)
            self._db = get_database(self._client, settings)
        return self._db

    @property
    def auth_service(self) -> AuthService:
        if self._auth_service is None:
            settings = get_auth_settings()
            self._auth_service = AuthService(
                UserRepository(self.db),
                PasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS),
                TokenService.from_settings(settings),
            )
        return self._auth_service


class PaymentTask(Task):
    """Base task for the payments worker."""

    abstract = True

    def __init__(self) -> None:
        self._payment_service: Optional[PaymentService] = None

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            settings = get_payments_settings()
            notifications_client = RpcClient(
                celery_app, service=NOTIFICATIONS_QUEUE, timeout=settings.RPC_TIMEOUT_SECONDS
            )
            self._payment_service = PaymentService(settings, notifications_client)
        return self._payment_service


class NotificationTask(Task):
    """Base task for the notifications worker."""

    abstract = True

    def __init__(self) -> None:
        self._notification_service: Optional[NotificationService] = None

    @property
    def notification_service(self) -> NotificationService:
        if self._notification_service is None:
            self._notification_service = NotificationService(get_notifications_settings())
        return self._notification_service

    def on_failure(self, exc: Exception, task_id: str, args: Any, kwargs: Any, einfo: Any) -> None:
        logger.error(f"Task {self.name} [{task_id}] failed: {exc}")
        super().on_failure(exc, task_id, args, kwargs, einfo)
