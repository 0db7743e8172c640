"""
Delegated authentication guard.

Services that do not own identities protect their routes with JwtAuthGuard:
the bearer token found on the request is sent to the auth service's
`authenticate` RPC and the identity it resolves is attached to the request.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status

from reservo.core.exceptions import ReservoError, UnavailableError
from reservo.core.security import extract_credential
from reservo.dtos.user import UserDTO
from reservo.rpc import RpcClient

logger = logging.getLogger(__name__)

AUTHENTICATE_PATTERN = "authenticate"


class NotAuthenticatedError(HTTPException):
    """The single rejection every guard failure maps to."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_auth_client(request: Request) -> RpcClient:
    """RPC client for the auth service, created at application startup."""
    return request.app.state.auth_client


class JwtAuthGuard:
    """
    FastAPI dependency admitting a request only if the auth service vouches for it.

    Usage:
        @router.get("/protected")
        async def protected_route(user: UserDTO = Depends(jwt_auth_guard)):
            return {"user_id": user.id}

    No credential means rejection without calling the auth service. Every
    failure, including the auth service being down, is reported to the client
    as the same 401; the guard does not retry.
    """

    async def __call__(
        self,
        request: Request,
        auth_client: RpcClient = Depends(get_auth_client),
    ) -> UserDTO:
        token = extract_credential(request)
        if not token:
            raise NotAuthenticatedError()

        try:
            reply = await auth_client.send(AUTHENTICATE_PATTERN, {"token": token})
        except UnavailableError as e:
            logger.warning(f"Auth service unavailable, rejecting request: {e.message}")
            raise NotAuthenticatedError()
        except ReservoError as e:
            logger.debug(f"Auth service rejected credential: {e.code}")
            raise NotAuthenticatedError()

        try:
            user = UserDTO.model_validate(reply)
        except ValueError:
            logger.warning("Auth service returned a malformed identity")
            raise NotAuthenticatedError()

        request.state.user = user
        return user


jwt_auth_guard = JwtAuthGuard()
