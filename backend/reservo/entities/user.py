from __future__ import annotations

from .base import BaseEntity


class User(BaseEntity):
    """User entity. `password` always holds a bcrypt hash."""

    email: str
    password: str
