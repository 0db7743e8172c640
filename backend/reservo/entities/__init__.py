from .base import BaseEntity, PyObjectId
from .reservation import Reservation
from .user import User

__all__ = [
    "BaseEntity",
    "PyObjectId",
    "Reservation",
    "User",
]
