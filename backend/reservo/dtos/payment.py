"""Payment DTOs"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class CardCharge(BaseModel):
    """Charge requested by a client: a Stripe payment method and an amount in dollars."""

    payment_method: str = Field(default="pm_card_visa", description="Stripe PaymentMethod id")
    amount: float = Field(..., gt=0)


class CreateChargeRequest(CardCharge):
    """Payload of the `create_charge` RPC."""

    email: EmailStr


class PaymentIntent(BaseModel):
    """Subset of the Stripe PaymentIntent object the system relies on."""

    id: str
    amount: int
    currency: str
    status: str
    client_secret: Optional[str] = None
