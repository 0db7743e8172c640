"""Password hashing and bearer credential extraction."""

from __future__ import annotations

from typing import Optional

from passlib.context import CryptContext
from starlette.requests import Request

# Cookie, request field and header name carrying the bearer token
AUTHENTICATION_KEY = "Authentication"


class PasswordHasher:
    """bcrypt hashing; verification is constant time."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        return self._context.verify(password, hashed_password)


def extract_credential(request: Request) -> Optional[str]:
    """Find the bearer token on a request.

    Checks, in order:
    1. Cookie (Authentication)
    2. Request field (request.state.Authentication), set by upstream middleware
    3. Header (Authentication)

    Returns:
        The first non-empty value, or None
    """
    candidates = (
        request.cookies.get(AUTHENTICATION_KEY),
        getattr(request.state, AUTHENTICATION_KEY, None),
        request.headers.get(AUTHENTICATION_KEY),
    )
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None
