"""User repository for database operations"""

from __future__ import annotations

from typing import Any, Mapping

from pymongo.database import Database

from reservo.entities.user import User

from .base import DocumentRepository, Filter


class UserRepository:
    """Repository for user documents"""

    collection_name = "users"

    def __init__(self, db: Database):
        self.documents: DocumentRepository[User] = DocumentRepository(
            db[self.collection_name], User
        )

    def create(self, fields: User | Mapping[str, Any]) -> User:
        return self.documents.create(fields)

    def find_one(self, query: Filter) -> User:
        return self.documents.find_one(query)

    def find_by_id(self, user_id: str) -> User:
        return self.documents.find_one({"id": user_id})

    def find_by_email(self, email: str) -> User:
        return self.documents.find_one({"email": email})

    def email_exists(self, email: str) -> bool:
        return self.documents.exists({"email": email})
