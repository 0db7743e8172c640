"""
Request/response and event messaging between services over Celery.

Workers wrap their handlers with `rpc_handler`, which turns domain errors into
an error envelope instead of a task failure. `RpcClient.send` publishes a task
by name, awaits its reply in a worker thread with a finite timeout and raises
the matching Reservo error for an error envelope.

Envelope:
    {"ok": true, "data": ...}
    {"ok": false, "error": {"code": ..., "message": ..., "details": {...}}}
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from celery import Celery
from celery.exceptions import TimeoutError as CeleryTimeoutError
from kombu.exceptions import OperationalError
from starlette.concurrency import run_in_threadpool

from reservo.core.exceptions import ERRORS_BY_CODE, ReservoError, UnavailableError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def rpc_handler(func: F) -> F:
    """Wrap a worker-side handler so its result travels as an RPC envelope."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Dict[str, Any]:
        try:
            data = func(*args, **kwargs)
        except ReservoError as e:
            logger.info(f"RPC handler {func.__name__} returned {e.code}: {e.message}")
            return {"ok": False, "error": e.to_dict()}
        return {"ok": True, "data": data}

    return wrapper  # type: ignore


class RpcClient:
    """
    Client for one remote service.

    Usage:
        auth_client = RpcClient(celery_app, service="auth", timeout=10)
        user = await auth_client.send("authenticate", {"token": token})
        payments_client.emit("notify_email", {"email": ..., "text": ...})
    """

    def __init__(self, celery: Celery, service: str, timeout: float):
        self._celery = celery
        self.service = service
        self.timeout = timeout

    async def send(self, pattern: str, payload: Dict[str, Any]) -> Any:
        """
        Call a remote operation and wait for its reply.

        The blocking wait runs in the threadpool so other requests keep being
        served while this one is suspended.

        Raises:
            UnavailableError: Broker unreachable, timeout or remote crash
            ReservoError: The domain error reported by the remote handler
        """
        try:
            result = self._celery.send_task(pattern, kwargs=payload)
        except OperationalError as e:
            raise UnavailableError(f"Could not reach {self.service}: {e}", service=self.service) from e

        try:
            reply = await run_in_threadpool(result.get, timeout=self.timeout, propagate=True)
        except CeleryTimeoutError as e:
            raise UnavailableError(
                f"{self.service} did not answer '{pattern}' within {self.timeout}s",
                service=self.service,
            ) from e
        except OperationalError as e:
            raise UnavailableError(f"Could not reach {self.service}: {e}", service=self.service) from e
        except Exception as e:
            # The remote task itself crashed
            raise UnavailableError(
                f"{self.service} failed handling '{pattern}': {e}", service=self.service
            ) from e

        return self._unwrap(pattern, reply)

    def emit(self, pattern: str, payload: Dict[str, Any]) -> None:
        """Publish an event without waiting for any reply."""
        try:
            self._celery.send_task(pattern, kwargs=payload)
        except OperationalError as e:
            raise UnavailableError(f"Could not reach {self.service}: {e}", service=self.service) from e

    def _unwrap(self, pattern: str, reply: Any) -> Any:
        if not isinstance(reply, dict) or "ok" not in reply:
            raise UnavailableError(
                f"Malformed reply from {self.service} for '{pattern}'", service=self.service
            )
        if reply["ok"]:
            return reply.get("data")

        error: Dict[str, Any] = reply.get("error") or {}
        code: Optional[str] = error.get("code")
        message = error.get("message") or f"{self.service} rejected '{pattern}'"
        error_class = ERRORS_BY_CODE.get(code or "")
        if error_class is None:
            raise UnavailableError(message, service=self.service, code=code)
        raise error_class(message, code=code, details=error.get("details"))
