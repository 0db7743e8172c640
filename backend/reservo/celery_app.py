"""Celery application bootstrap used by workers and as the RPC transport of the APIs."""

from __future__ import annotations

from celery import Celery
from celery.signals import worker_ready
from kombu import Exchange, Queue

from reservo.config import get_common_settings

settings = get_common_settings()

AUTH_QUEUE = "auth"
PAYMENTS_QUEUE = "payments"
NOTIFICATIONS_QUEUE = "notifications"
# Unrouted task names land here, where no service worker consumes them
DEFAULT_QUEUE = "reservo.default"

celery_app = Celery(
    "reservo",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "reservo.tasks.auth",
        "reservo.tasks.payments",
        "reservo.tasks.notifications",
    ],
)

celery_app.conf.update(
    task_default_queue=DEFAULT_QUEUE,
    task_default_exchange="reservo",
    task_default_routing_key="rpc.default",
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # RPC replies are consumed once by the caller
    result_expires=300,
    worker_prefetch_multiplier=1,
    task_queues=[
        # Auth: token verification for every guarded request
        Queue(AUTH_QUEUE, Exchange("reservo"), routing_key="rpc.auth"),
        # Payments: Stripe calls
        Queue(PAYMENTS_QUEUE, Exchange("reservo"), routing_key="rpc.payments"),
        # Notifications: outgoing email, fire-and-forget
        Queue(NOTIFICATIONS_QUEUE, Exchange("reservo"), routing_key="rpc.notifications"),
        Queue(DEFAULT_QUEUE, Exchange("reservo"), routing_key="rpc.default"),
    ],
    task_routes={
        "authenticate": {"queue": AUTH_QUEUE, "routing_key": "rpc.auth"},
        "create_charge": {"queue": PAYMENTS_QUEUE, "routing_key": "rpc.payments"},
        "notify_email": {"queue": NOTIFICATIONS_QUEUE, "routing_key": "rpc.notifications"},
    },
    broker_connection_retry_on_startup=True,
    timezone="UTC",
)


@worker_ready.connect
def on_worker_ready(**kwargs):
    """Initialize logging when worker is ready."""
    from reservo.core.logging import setup_logging

    setup_logging(settings.ENV)


__all__ = ["celery_app"]
