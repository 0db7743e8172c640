"""JWT issuing and verification for the auth service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from reservo.config import AuthSettings
from reservo.core.exceptions import UnauthorizedError


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class TokenService:
    """Signs and verifies time-limited tokens embedding a user id."""

    def __init__(self, secret: str, expiration_seconds: int, algorithm: str = "HS256"):
        self._secret = secret
        self._algorithm = algorithm
        self.expiration = timedelta(seconds=expiration_seconds)

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> "TokenService":
        return cls(settings.JWT_SECRET, settings.JWT_EXPIRATION, settings.JWT_ALGORITHM)

    def issue(self, user_id: str, now: Optional[datetime] = None) -> IssuedToken:
        """Create a token for the user, valid until now + the configured lifetime.

        Args:
            user_id: User ID to encode in the token
            now: Issue time (defaults to the current UTC time)
        """
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.expiration
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    def decode(self, token: str) -> str:
        """Verify signature and expiry and return the embedded user id.

        Raises:
            UnauthorizedError: If the token is malformed, expired or signed with another secret
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise UnauthorizedError("Token has expired") from e
        except JWTError as e:
            raise UnauthorizedError("Invalid token") from e

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError("Invalid token")
        return user_id
