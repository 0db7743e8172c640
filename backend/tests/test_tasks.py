"""Tests for the worker-side RPC handlers."""

from unittest.mock import MagicMock

import pytest

from reservo.core.exceptions import PaymentError, UnavailableError
from reservo.dtos.notification import NotifyEmailRequest
from reservo.dtos.payment import CreateChargeRequest, PaymentIntent
from reservo.dtos.user import CreateUserRequest
from reservo.tasks.auth import handle_authenticate
from reservo.tasks.notifications import handle_notify_email
from reservo.tasks.payments import handle_create_charge


class TestAuthenticateHandler:
    def test_valid_token(self, user_service, auth_service):
        user = user_service.register(CreateUserRequest(email="a@x.com", password="pw123!"))
        token = auth_service.issue_token(user).token

        reply = handle_authenticate(auth_service, {"token": token})

        assert reply == {"ok": True, "data": {"id": user.id, "email": "a@x.com"}}

    def test_bad_token(self, auth_service):
        reply = handle_authenticate(auth_service, {"token": "garbage"})

        assert reply["ok"] is False
        assert reply["error"]["code"] == "UNAUTHORIZED"

    def test_missing_token(self, auth_service):
        reply = handle_authenticate(auth_service, {})

        assert reply["ok"] is False
        assert reply["error"]["code"] == "UNAUTHORIZED"


class TestCreateChargeHandler:
    def test_success(self):
        service = MagicMock()
        service.create_charge.return_value = PaymentIntent(
            id="pi_1", amount=5000, currency="usd", status="succeeded"
        )

        reply = handle_create_charge(
            service, {"payment_method": "pm_card_visa", "amount": 50, "email": "a@x.com"}
        )

        assert reply["ok"] is True
        assert reply["data"]["id"] == "pi_1"
        service.create_charge.assert_called_once_with(
            CreateChargeRequest(payment_method="pm_card_visa", amount=50, email="a@x.com")
        )

    def test_invalid_payload(self):
        service = MagicMock()

        reply = handle_create_charge(service, {"amount": -1, "email": "a@x.com"})

        assert reply["ok"] is False
        assert reply["error"]["code"] == "BAD_REQUEST"
        assert reply["error"]["details"]["errors"]
        service.create_charge.assert_not_called()

    def test_declined(self):
        service = MagicMock()
        service.create_charge.side_effect = PaymentError("Your card was declined.")

        reply = handle_create_charge(
            service, {"payment_method": "pm_card_visa", "amount": 50, "email": "a@x.com"}
        )

        assert reply["error"] == {
            "code": "PAYMENT_FAILED",
            "message": "Your card was declined.",
            "details": {},
        }


class TestNotifyEmailHandler:
    def test_sends(self):
        service = MagicMock()

        assert handle_notify_email(service, {"email": "a@x.com", "text": "hi"}) is True
        service.notify_email.assert_called_once_with(NotifyEmailRequest(email="a@x.com", text="hi"))

    def test_malformed_event_dropped(self):
        service = MagicMock()

        assert handle_notify_email(service, {"text": "hi"}) is False
        service.notify_email.assert_not_called()

    def test_delivery_failure_raises_for_retry(self):
        service = MagicMock()
        service.notify_email.side_effect = UnavailableError("smtp down", service="smtp")

        with pytest.raises(UnavailableError):
            handle_notify_email(service, {"email": "a@x.com", "text": "hi"})
