from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BaseEntity


class Reservation(BaseEntity):
    """A booking of a place by a user for a date range."""

    timestamp: datetime
    start_date: datetime
    end_date: datetime
    user_id: str = Field(..., description="Back-reference to the booking user")
    place_id: str
    invoice_id: Optional[str] = Field(default=None, description="Payment intent id")
