"""
Authentication service.

Owns identity verification for the whole system: the local strategy
(email/password), token issuance on login and token verification for the
`authenticate` RPC used by other services' guards.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from starlette.responses import Response

from reservo.core.exceptions import NotFoundError, UnauthorizedError
from reservo.core.security import AUTHENTICATION_KEY, PasswordHasher
from reservo.dtos.user import UserDTO
from reservo.entities.user import User
from reservo.repositories.user import UserRepository
from reservo.services.token_service import IssuedToken, TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credentials are not valid."


class AuthService:
    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        secure_cookies: bool = True,
    ):
        self.user_repo = user_repo
        self.hasher = hasher
        self.tokens = tokens
        self.secure_cookies = secure_cookies

    def validate_credentials(self, email: str, password: str) -> User:
        """
        Local strategy: resolve a user by email and check the password.

        Unknown email and wrong password fail the same way.

        Raises:
            UnauthorizedError: If the credentials do not match a user
        """
        try:
            user = self.user_repo.find_by_email(email)
        except NotFoundError:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not self.hasher.verify(password, user.password):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user

    def issue_token(self, user: User, now: Optional[datetime] = None) -> IssuedToken:
        return self.tokens.issue(str(user.id), now=now)

    def login(self, response: Response, user: User) -> IssuedToken:
        """Issue a token and hand it to the client as the Authentication cookie."""
        issued = self.issue_token(user)
        max_age = int((issued.expires_at - datetime.now(timezone.utc)).total_seconds())
        response.set_cookie(
            key=AUTHENTICATION_KEY,
            value=issued.token,
            httponly=True,
            secure=self.secure_cookies,
            samesite="lax",
            max_age=max(max_age, 0),
            expires=issued.expires_at,
            path="/",
        )
        logger.info(f"User {user.id} logged in")
        return issued

    def logout(self, response: Response) -> None:
        response.delete_cookie(key=AUTHENTICATION_KEY, path="/")

    def authenticate(self, token: str) -> UserDTO:
        """
        Verify a token and resolve the full identity it names.

        Raises:
            UnauthorizedError: Bad signature, expired token or unknown user
        """
        user_id = self.tokens.decode(token)
        try:
            user = self.user_repo.find_by_id(user_id)
        except NotFoundError:
            raise UnauthorizedError("Unauthorized")
        return UserDTO(id=str(user.id), email=user.email)
