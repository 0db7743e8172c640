"""Tests for the Celery-backed RPC client and the worker-side envelope."""

import asyncio
import time
from unittest.mock import MagicMock

import pytest
from celery.exceptions import TimeoutError as CeleryTimeoutError
from kombu.exceptions import OperationalError

from reservo.core.exceptions import (
    ConflictError,
    NotFoundError,
    PaymentError,
    UnauthorizedError,
    UnavailableError,
)
from reservo.rpc import RpcClient, rpc_handler


def make_client(get=None, timeout=2.0):
    """Build an RpcClient over a mocked Celery app whose result.get is `get`."""
    celery = MagicMock()
    result = MagicMock()
    if callable(get):
        result.get.side_effect = get
    else:
        result.get.return_value = get
    celery.send_task.return_value = result
    return RpcClient(celery, service="auth", timeout=timeout), celery, result


class TestRpcHandler:
    def test_wraps_result(self):
        @rpc_handler
        def handler(x):
            return {"double": x * 2}

        assert handler(2) == {"ok": True, "data": {"double": 4}}

    def test_domain_error_becomes_envelope(self):
        @rpc_handler
        def handler():
            raise NotFoundError("User not found", details={"id": "1"})

        assert handler() == {
            "ok": False,
            "error": {"code": "NOT_FOUND", "message": "User not found", "details": {"id": "1"}},
        }

    def test_unexpected_error_propagates(self):
        @rpc_handler
        def handler():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            handler()


class TestSend:
    """Tests for RpcClient.send."""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        client, celery, result = make_client({"ok": True, "data": {"id": "1"}})

        reply = await client.send("authenticate", {"token": "abc"})

        assert reply == {"id": "1"}
        celery.send_task.assert_called_once_with("authenticate", kwargs={"token": "abc"})
        result.get.assert_called_once_with(timeout=2.0, propagate=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code,error_class",
        [
            ("NOT_FOUND", NotFoundError),
            ("UNAUTHORIZED", UnauthorizedError),
            ("CONFLICT", ConflictError),
            ("PAYMENT_FAILED", PaymentError),
        ],
    )
    async def test_error_envelope_raises_matching_error(self, code, error_class):
        client, _, _ = make_client(
            {"ok": False, "error": {"code": code, "message": "nope", "details": {"k": "v"}}}
        )

        with pytest.raises(error_class) as exc_info:
            await client.send("authenticate", {"token": "abc"})

        assert exc_info.value.message == "nope"
        assert exc_info.value.details == {"k": "v"}

    @pytest.mark.asyncio
    async def test_unknown_error_code_is_unavailable(self):
        client, _, _ = make_client({"ok": False, "error": {"code": "WEIRD", "message": "?"}})

        with pytest.raises(UnavailableError):
            await client.send("authenticate", {"token": "abc"})

    @pytest.mark.asyncio
    async def test_malformed_reply_is_unavailable(self):
        client, _, _ = make_client("not an envelope")

        with pytest.raises(UnavailableError):
            await client.send("authenticate", {"token": "abc"})

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self):
        def get(timeout, propagate):
            raise CeleryTimeoutError("The operation timed out.")

        client, _, _ = make_client(get)

        with pytest.raises(UnavailableError) as exc_info:
            await client.send("authenticate", {"token": "abc"})

        assert exc_info.value.service == "auth"

    @pytest.mark.asyncio
    async def test_broker_down_is_unavailable(self):
        client, celery, _ = make_client()
        celery.send_task.side_effect = OperationalError("connection refused")

        with pytest.raises(UnavailableError):
            await client.send("authenticate", {"token": "abc"})

    @pytest.mark.asyncio
    async def test_remote_crash_is_unavailable(self):
        def get(timeout, propagate):
            raise KeyError("token")

        client, _, _ = make_client(get)

        with pytest.raises(UnavailableError):
            await client.send("authenticate", {"token": "abc"})

    @pytest.mark.asyncio
    async def test_waiting_does_not_block_the_event_loop(self):
        """Two slow calls in flight overlap instead of running back to back."""

        def get(timeout, propagate):
            time.sleep(0.3)
            return {"ok": True, "data": None}

        client, _, _ = make_client(get)

        started = time.monotonic()
        await asyncio.gather(
            client.send("authenticate", {"token": "a"}),
            client.send("authenticate", {"token": "b"}),
        )

        assert time.monotonic() - started < 0.55


class TestEmit:
    def test_publishes_without_waiting(self):
        client, celery, result = make_client()

        client.emit("notify_email", {"email": "a@x.com", "text": "hi"})

        celery.send_task.assert_called_once_with(
            "notify_email", kwargs={"email": "a@x.com", "text": "hi"}
        )
        result.get.assert_not_called()

    def test_broker_down_is_unavailable(self):
        client, celery, _ = make_client()
        celery.send_task.side_effect = OperationalError("connection refused")

        with pytest.raises(UnavailableError):
            client.emit("notify_email", {"email": "a@x.com", "text": "hi"})
