"""
Payment Service - charge cards through the Stripe API.

Talks to Stripe's REST API directly over httpx and emits a `notify_email`
event once a charge succeeds.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from reservo.config import PaymentsSettings
from reservo.core.exceptions import PaymentError, UnavailableError
from reservo.dtos.notification import NotifyEmailRequest
from reservo.dtos.payment import CreateChargeRequest, PaymentIntent
from reservo.rpc import RpcClient

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Service for creating Stripe payment intents.

    Usage:
        service = PaymentService(settings, notifications_client)
        intent = service.create_charge(
            CreateChargeRequest(amount=5, payment_method="pm_card_visa", email="a@x.com")
        )
    """

    def __init__(
        self,
        settings: PaymentsSettings,
        notifications_client: RpcClient,
        http_client: Optional[httpx.Client] = None,
    ):
        self.currency = settings.STRIPE_CURRENCY
        self.notifications_client = notifications_client
        self._client = http_client or httpx.Client(
            base_url=settings.STRIPE_API_URL,
            auth=(settings.STRIPE_SECRET_KEY, ""),
            timeout=settings.STRIPE_TIMEOUT_SECONDS,
        )

    def create_charge(self, payload: CreateChargeRequest) -> PaymentIntent:
        """
        Create and confirm a payment intent for the charge.

        Args:
            payload: Amount in dollars, Stripe payment method and payer email

        Returns:
            The confirmed PaymentIntent

        Raises:
            PaymentError: Stripe rejected the charge
            UnavailableError: Stripe could not be reached
        """
        form: Dict[str, Any] = {
            "amount": int(round(payload.amount * 100)),  # Stripe amounts are in cents
            "currency": self.currency,
            "payment_method": payload.payment_method,
            "payment_method_types[]": "card",
            "confirm": "true",
        }

        try:
            response = self._client.post("/v1/payment_intents", data=form)
        except httpx.TransportError as e:
            logger.error(f"Stripe request failed: {e}")
            raise UnavailableError(f"Stripe request failed: {e}", service="stripe") from e

        if response.status_code >= 400:
            message = _stripe_error_message(response)
            logger.warning(f"Stripe rejected charge: {response.status_code} - {message}")
            if response.status_code >= 500:
                raise UnavailableError(message, service="stripe")
            raise PaymentError(message, details={"status_code": response.status_code})

        intent = PaymentIntent.model_validate(response.json())
        logger.info(f"Payment intent {intent.id} created with status {intent.status}")

        self._notify_payer(payload)
        return intent

    def _notify_payer(self, payload: CreateChargeRequest) -> None:
        """Emit the receipt email event. The charge stands even if this fails."""
        notification = NotifyEmailRequest(
            email=payload.email,
            text=f"Payment of ${payload.amount:g} has completed successfully",
        )
        try:
            self.notifications_client.emit("notify_email", notification.model_dump(mode="json"))
        except UnavailableError as e:
            logger.warning(f"Failed to emit payment notification for {payload.email}: {e.message}")


def _stripe_error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return response.text or f"Stripe returned {response.status_code}"
    return error.get("message") or f"Stripe returned {response.status_code}"
