from .notification import NotifyEmailRequest
from .payment import CardCharge, CreateChargeRequest, PaymentIntent
from .reservation import (
    CreateReservationRequest,
    ReservationResponse,
    UpdateReservationRequest,
)
from .user import (
    AuthenticateRequest,
    CreateUserRequest,
    LoginRequest,
    UserDTO,
    UserResponse,
)

__all__ = [
    "AuthenticateRequest",
    "CardCharge",
    "CreateChargeRequest",
    "CreateReservationRequest",
    "CreateUserRequest",
    "LoginRequest",
    "NotifyEmailRequest",
    "PaymentIntent",
    "ReservationResponse",
    "UpdateReservationRequest",
    "UserDTO",
    "UserResponse",
]
