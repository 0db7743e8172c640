"""Reservation DTOs"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .payment import CardCharge


class CreateReservationRequest(BaseModel):
    start_date: datetime
    end_date: datetime
    place_id: str = Field(..., min_length=1)
    charge: CardCharge

    @model_validator(mode="after")
    def check_date_range(self) -> "CreateReservationRequest":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class UpdateReservationRequest(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    place_id: Optional[str] = Field(default=None, min_length=1)

    model_config = ConfigDict(extra="forbid")


class ReservationResponse(BaseModel):
    id: str
    timestamp: datetime
    start_date: datetime
    end_date: datetime
    user_id: str
    place_id: str
    invoice_id: Optional[str] = None
