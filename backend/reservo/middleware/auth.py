"""Authentication dependencies for the auth service's own routes.

The auth service verifies tokens locally instead of calling itself over RPC;
other services use reservo.middleware.guard.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from reservo.api.dependencies import get_auth_service
from reservo.core.exceptions import UnauthorizedError
from reservo.core.security import extract_credential
from reservo.dtos.user import UserDTO
from reservo.services.auth_service import AuthService


def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserDTO:
    """Extract and validate the bearer token, returning the identity it names.

    Checks for token in:
    1. Cookie (Authentication)
    2. Request field (request.state.Authentication)
    3. Header (Authentication)

    Raises:
        HTTPException: If no valid token is found
    """
    token = extract_credential(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please login.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = auth_service.authenticate(token)
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = user
    return user
