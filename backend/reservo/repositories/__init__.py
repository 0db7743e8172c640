from .base import DocumentRepository
from .reservation import ReservationRepository
from .user import UserRepository

__all__ = [
    "DocumentRepository",
    "ReservationRepository",
    "UserRepository",
]
