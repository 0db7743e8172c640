"""User registration and current-user endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from reservo.api.dependencies import get_user_service
from reservo.dtos.user import CreateUserRequest, UserDTO, UserResponse
from reservo.middleware.auth import get_current_user
from reservo.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: CreateUserRequest, service: UserService = Depends(get_user_service)):
    user = service.register(payload)
    return UserResponse(id=str(user.id), email=user.email)


@router.get("", response_model=UserResponse)
def get_user(user: UserDTO = Depends(get_current_user)):
    return UserResponse(id=user.id, email=user.email)
