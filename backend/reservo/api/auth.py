from fastapi import APIRouter, Depends, Response, status

from reservo.api.dependencies import get_auth_service
from reservo.dtos.user import LoginRequest, UserResponse
from reservo.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=UserResponse)
def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Log in with email and password; the token is returned in the Authentication cookie."""
    user = auth_service.validate_credentials(payload.email, payload.password)
    auth_service.login(response, user)
    return UserResponse(id=str(user.id), email=user.email)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response, auth_service: AuthService = Depends(get_auth_service)):
    """Clear the Authentication cookie."""
    auth_service.logout(response)
