"""User account service using repository pattern"""

from __future__ import annotations

import logging

from reservo.core.exceptions import ConflictError
from reservo.core.security import PasswordHasher
from reservo.dtos.user import CreateUserRequest
from reservo.entities.user import User
from reservo.repositories.base import Filter
from reservo.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Registers and looks up users. Passwords are only ever stored hashed."""

    def __init__(self, user_repo: UserRepository, hasher: PasswordHasher):
        self.user_repo = user_repo
        self.hasher = hasher

    def register(self, payload: CreateUserRequest) -> User:
        """
        Create a user account.

        The explicit existence check gives a clear error for the common case;
        the unique email index turns a concurrent duplicate into ConflictError too.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.user_repo.email_exists(payload.email):
            raise ConflictError(
                "Email already exists",
                details={"email": payload.email},
            )

        user = self.user_repo.create(
            {
                "email": payload.email,
                "password": self.hasher.hash(payload.password),
            }
        )
        logger.info(f"Registered user {user.id}")
        return user

    def get_user(self, query: Filter) -> User:
        return self.user_repo.find_one(query)

    def get_user_by_id(self, user_id: str) -> User:
        return self.user_repo.find_by_id(user_id)
