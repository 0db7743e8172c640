"""Reservation service: CRUD over reservations, charging through the payments service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from starlette.concurrency import run_in_threadpool

from reservo.core.exceptions import InvalidRequestError, NotFoundError
from reservo.dtos.payment import CreateChargeRequest, PaymentIntent
from reservo.dtos.reservation import CreateReservationRequest, UpdateReservationRequest
from reservo.dtos.user import UserDTO
from reservo.entities.reservation import Reservation
from reservo.repositories.reservation import ReservationRepository
from reservo.rpc import RpcClient

logger = logging.getLogger(__name__)

INVALID_RANGE = "end_date must be after start_date"


class ReservationService:
    """Service for reservation operations."""

    def __init__(self, reservation_repo: ReservationRepository, payments_client: RpcClient):
        self.reservation_repo = reservation_repo
        self.payments_client = payments_client

    async def create(self, payload: CreateReservationRequest, user: UserDTO) -> Reservation:
        """
        Charge the user, then store the reservation with the resulting invoice id.

        Nothing is stored when the charge fails.
        """
        charge = CreateChargeRequest(
            payment_method=payload.charge.payment_method,
            amount=payload.charge.amount,
            email=user.email,
        )
        reply = await self.payments_client.send("create_charge", charge.model_dump(mode="json"))
        intent = PaymentIntent.model_validate(reply)

        reservation = await run_in_threadpool(
            self.reservation_repo.create,
            {
                "timestamp": datetime.now(timezone.utc),
                "start_date": payload.start_date,
                "end_date": payload.end_date,
                "place_id": payload.place_id,
                "user_id": user.id,
                "invoice_id": intent.id,
            },
        )
        logger.info(f"Reservation {reservation.id} created for user {user.id}, invoice {intent.id}")
        return reservation

    def find_all(self) -> List[Reservation]:
        return self.reservation_repo.find_many({})

    def find_one(self, reservation_id: str) -> Reservation:
        return self.reservation_repo.find_one({"id": reservation_id})

    def update(self, reservation_id: str, payload: UpdateReservationRequest) -> Reservation:
        """Apply the fields present in the payload; other fields are left untouched."""
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise InvalidRequestError("No fields to update")

        query: Dict[str, Any] = {"id": reservation_id}
        if "start_date" in updates and "end_date" in updates:
            if updates["end_date"] <= updates["start_date"]:
                raise InvalidRequestError(INVALID_RANGE)
        elif "end_date" in updates:
            # The stored start_date must stay before the new end_date
            query["start_date"] = {"$lt": updates["end_date"]}
        elif "start_date" in updates:
            query["end_date"] = {"$gt": updates["start_date"]}

        try:
            return self.reservation_repo.find_one_and_update(query, updates)
        except NotFoundError:
            if len(query) > 1 and self.reservation_repo.exists({"id": reservation_id}):
                raise InvalidRequestError(INVALID_RANGE)
            raise

    def remove(self, reservation_id: str) -> Reservation:
        return self.reservation_repo.find_one_and_delete({"id": reservation_id})
