"""Reservation CRUD endpoints. Every route requires an authenticated user."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from reservo.api.dependencies import get_reservation_service
from reservo.dtos.reservation import (
    CreateReservationRequest,
    ReservationResponse,
    UpdateReservationRequest,
)
from reservo.dtos.user import UserDTO
from reservo.entities.reservation import Reservation
from reservo.middleware.guard import jwt_auth_guard
from reservo.services.reservation_service import ReservationService

router = APIRouter(
    prefix="/reservations",
    tags=["Reservations"],
    dependencies=[Depends(jwt_auth_guard)],
)


def _to_response(reservation: Reservation) -> ReservationResponse:
    return ReservationResponse.model_validate(reservation.model_dump())


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: CreateReservationRequest,
    user: UserDTO = Depends(jwt_auth_guard),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.create(payload, user)
    return _to_response(reservation)


@router.get("", response_model=List[ReservationResponse])
def list_reservations(service: ReservationService = Depends(get_reservation_service)):
    return [_to_response(r) for r in service.find_all()]


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: str,
    service: ReservationService = Depends(get_reservation_service),
):
    return _to_response(service.find_one(reservation_id))


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: str,
    payload: UpdateReservationRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    return _to_response(service.update(reservation_id, payload))


@router.delete("/{reservation_id}", response_model=ReservationResponse)
def delete_reservation(
    reservation_id: str,
    service: ReservationService = Depends(get_reservation_service),
):
    return _to_response(service.remove(reservation_id))
