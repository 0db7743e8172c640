"""Reservation repository for database operations"""

from __future__ import annotations

from typing import Any, List, Mapping

from pymongo.database import Database

from reservo.entities.reservation import Reservation

from .base import DocumentRepository, Filter


class ReservationRepository:
    """Repository for reservation documents"""

    collection_name = "reservations"

    def __init__(self, db: Database):
        self.documents: DocumentRepository[Reservation] = DocumentRepository(
            db[self.collection_name], Reservation
        )

    def create(self, fields: Reservation | Mapping[str, Any]) -> Reservation:
        return self.documents.create(fields)

    def find_one(self, query: Filter) -> Reservation:
        return self.documents.find_one(query)

    def find_many(self, query: Filter | None = None) -> List[Reservation]:
        return self.documents.find_many(query)

    def find_one_and_update(self, query: Filter, updates: Mapping[str, Any]) -> Reservation:
        return self.documents.find_one_and_update(query, updates)

    def find_one_and_delete(self, query: Filter) -> Reservation:
        return self.documents.find_one_and_delete(query)

    def exists(self, query: Filter) -> bool:
        return self.documents.exists(query)

    def find_by_user(self, user_id: str) -> List[Reservation]:
        """List reservations booked by a user"""
        return self.documents.find_many({"user_id": user_id})
