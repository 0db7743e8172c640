"""User and authentication DTOs"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str


class UserDTO(BaseModel):
    """
    Identity resolved for an authenticated request.

    Built fresh on every request and never persisted by the consuming service.
    """

    id: str
    email: str

    model_config = ConfigDict(frozen=True)


class AuthenticateRequest(BaseModel):
    """Payload of the `authenticate` RPC."""

    token: str
