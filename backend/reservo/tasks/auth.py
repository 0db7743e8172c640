"""Auth worker: answers the `authenticate` RPC used by other services' guards."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError

from reservo.celery_app import celery_app
from reservo.core.exceptions import UnauthorizedError
from reservo.dtos.user import AuthenticateRequest
from reservo.rpc import rpc_handler
from reservo.services.auth_service import AuthService
from reservo.tasks.base import AuthTask


@rpc_handler
def handle_authenticate(auth_service: AuthService, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve the identity behind a token. Any failure is UNAUTHORIZED."""
    try:
        request = AuthenticateRequest.model_validate(payload)
    except ValidationError:
        raise UnauthorizedError()
    return auth_service.authenticate(request.token).model_dump()


@celery_app.task(bind=True, base=AuthTask, name="authenticate")
def authenticate(self: AuthTask, **payload: Any) -> Dict[str, Any]:
    return handle_authenticate(self.auth_service, payload)
