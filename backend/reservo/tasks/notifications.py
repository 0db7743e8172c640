"""Notifications worker: consumes `notify_email` events."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from reservo.celery_app import celery_app
from reservo.core.exceptions import UnavailableError
from reservo.dtos.notification import NotifyEmailRequest
from reservo.services.notification_service import NotificationService
from reservo.tasks.base import NotificationTask

logger = logging.getLogger(__name__)


def handle_notify_email(notification_service: NotificationService, payload: dict[str, Any]) -> bool:
    """Send the email. Malformed events are dropped, delivery failures raise."""
    try:
        request = NotifyEmailRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Dropping malformed notify_email event: {e.errors(include_url=False)}")
        return False
    notification_service.notify_email(request)
    return True


@celery_app.task(
    bind=True,
    base=NotificationTask,
    name="notify_email",
    ignore_result=True,
    autoretry_for=(UnavailableError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def notify_email(self: NotificationTask, **payload: Any) -> bool:
    return handle_notify_email(self.notification_service, payload)
