"""Service providers for route handlers.

Long-lived collaborators (settings, hasher, token service, RPC clients) are
created once by the application factory and kept on `app.state`; services are
assembled per request around the shared database handle.
"""

from __future__ import annotations

from fastapi import Depends, Request
from pymongo.database import Database

from reservo.database.mongo import get_db
from reservo.repositories.reservation import ReservationRepository
from reservo.repositories.user import UserRepository
from reservo.services.auth_service import AuthService
from reservo.services.reservation_service import ReservationService
from reservo.services.user_service import UserService


def get_user_service(request: Request, db: Database = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db), request.app.state.password_hasher)


def get_auth_service(request: Request, db: Database = Depends(get_db)) -> AuthService:
    return AuthService(
        UserRepository(db),
        request.app.state.password_hasher,
        request.app.state.token_service,
        secure_cookies=not request.app.state.settings.DEBUG,
    )


def get_reservation_service(
    request: Request, db: Database = Depends(get_db)
) -> ReservationService:
    return ReservationService(ReservationRepository(db), request.app.state.payments_client)
