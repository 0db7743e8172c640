"""Payments worker: answers the `create_charge` RPC."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError

from reservo.celery_app import celery_app
from reservo.core.exceptions import InvalidRequestError
from reservo.dtos.payment import CreateChargeRequest
from reservo.rpc import rpc_handler
from reservo.services.payment_service import PaymentService
from reservo.tasks.base import PaymentTask


@rpc_handler
def handle_create_charge(payment_service: PaymentService, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        request = CreateChargeRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError("Invalid charge", details={"errors": [err["msg"] for err in e.errors()]})
    return payment_service.create_charge(request).model_dump()


@celery_app.task(bind=True, base=PaymentTask, name="create_charge")
def create_charge(self: PaymentTask, **payload: Any) -> Dict[str, Any]:
    return handle_create_charge(self.payment_service, payload)
