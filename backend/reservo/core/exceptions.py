"""
Base exception classes for Reservo.

Domain errors (NotFound, Unauthorized, Conflict, Payment) are expected outcomes
translated into user-facing responses by the caller. UnavailableError marks an
infrastructure failure (store or remote service unreachable) and propagates.
"""

from __future__ import annotations

from typing import Any, Optional


class ReservoError(Exception):
    """Base exception for all Reservo errors."""

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API and RPC responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(ReservoError):
    """Requested document does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, message: str = "Document not found", **kwargs: Any):
        super().__init__(message, **kwargs)


class UnauthorizedError(ReservoError):
    """Credential missing, malformed, expired or not matching."""

    status_code = 401
    default_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", **kwargs: Any):
        super().__init__(message, **kwargs)


class ConflictError(ReservoError):
    """A unique field is already taken."""

    status_code = 409
    default_code = "CONFLICT"


class InvalidRequestError(ReservoError):
    """Request is well-formed but its values are inconsistent."""

    status_code = 400
    default_code = "BAD_REQUEST"


class PaymentError(ReservoError):
    """The payment provider declined or rejected a charge."""

    status_code = 402
    default_code = "PAYMENT_FAILED"


class UnavailableError(ReservoError):
    """Store or remote service unreachable or timed out."""

    status_code = 503
    default_code = "SERVICE_UNAVAILABLE"

    def __init__(self, message: str, service: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.service = service
        self.details["service"] = service


ERRORS_BY_CODE: dict[str, type[ReservoError]] = {
    NotFoundError.default_code: NotFoundError,
    UnauthorizedError.default_code: UnauthorizedError,
    ConflictError.default_code: ConflictError,
    InvalidRequestError.default_code: InvalidRequestError,
    PaymentError.default_code: PaymentError,
}
