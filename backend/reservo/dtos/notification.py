"""Notification DTOs"""

from pydantic import BaseModel, EmailStr, Field


class NotifyEmailRequest(BaseModel):
    """Payload of the `notify_email` event."""

    email: EmailStr
    text: str = Field(..., min_length=1)
