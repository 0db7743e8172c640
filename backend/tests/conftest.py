"""
Shared test fixtures and utilities.

Required settings are provided through the environment before any reservo
module reads them; the Celery transport is kept in memory.
"""

import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("JWT_EXPIRATION", "3600")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("SMTP_SERVER_HOST", "smtp.example.com")
os.environ.setdefault("SMTP_USER", "noreply@example.com")
os.environ.setdefault("SMTP_PASS", "smtp-password")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from typing import Any, Dict, List, Optional, Tuple  # noqa: E402

import mongomock  # noqa: E402
import pytest  # noqa: E402

from reservo.config import AuthSettings  # noqa: E402
from reservo.core.security import PasswordHasher  # noqa: E402
from reservo.database.ensure_indexes import ensure_indexes  # noqa: E402
from reservo.repositories.user import UserRepository  # noqa: E402
from reservo.services.auth_service import AuthService  # noqa: E402
from reservo.services.token_service import TokenService  # noqa: E402
from reservo.services.user_service import UserService  # noqa: E402

TEST_JWT_SECRET = "test-secret-key-for-testing-only"


class FakeRpcClient:
    """
    Stand-in for RpcClient recording every call.

    Replies are looked up by pattern; an exception instance is raised instead
    of returned.
    """

    def __init__(self, service: str = "fake", replies: Optional[Dict[str, Any]] = None):
        self.service = service
        self.timeout = 1.0
        self.replies: Dict[str, Any] = replies or {}
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.emitted: List[Tuple[str, Dict[str, Any]]] = []

    async def send(self, pattern: str, payload: Dict[str, Any]) -> Any:
        self.sent.append((pattern, payload))
        reply = self.replies.get(pattern)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def emit(self, pattern: str, payload: Dict[str, Any]) -> None:
        self.emitted.append((pattern, payload))
        reply = self.replies.get(pattern)
        if isinstance(reply, Exception):
            raise reply


@pytest.fixture
def mongo_db():
    """A fresh in-memory MongoDB database per test."""
    client = mongomock.MongoClient()
    yield client["reservo_test"]
    client.close()


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(
        MONGODB_URI="mongodb://localhost:27017",
        JWT_SECRET=TEST_JWT_SECRET,
        JWT_EXPIRATION=3600,
        PASSWORD_HASH_ROUNDS=4,
        DEBUG=True,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service(auth_settings: AuthSettings) -> TokenService:
    return TokenService.from_settings(auth_settings)


@pytest.fixture
def user_repo(mongo_db) -> UserRepository:
    ensure_indexes(mongo_db)
    return UserRepository(mongo_db)


@pytest.fixture
def user_service(user_repo: UserRepository, hasher: PasswordHasher) -> UserService:
    return UserService(user_repo, hasher)


@pytest.fixture
def auth_service(
    user_repo: UserRepository, hasher: PasswordHasher, token_service: TokenService
) -> AuthService:
    return AuthService(user_repo, hasher, token_service, secure_cookies=False)
