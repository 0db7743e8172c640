"""Generic document repository for MongoDB collections"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    DuplicateKeyError,
    NetworkTimeout,
    ServerSelectionTimeoutError,
)

from reservo.core.exceptions import ConflictError, NotFoundError, UnavailableError
from reservo.entities.base import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseEntity)
F = TypeVar("F", bound=Callable[..., Any])

# Exceptions that mean the store could not be reached, as opposed to a query result
UNAVAILABLE_EXCEPTIONS = (
    ServerSelectionTimeoutError,
    NetworkTimeout,
    AutoReconnect,
    ConnectionFailure,
)

Filter = Mapping[str, Any]


def _translate_store_errors(func: F) -> F:
    """Map pymongo infrastructure errors onto the Reservo error taxonomy."""

    @functools.wraps(func)
    def wrapper(self: "DocumentRepository[Any]", *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except DuplicateKeyError as e:
            raise ConflictError(
                f"Duplicate value in {self.collection.name}",
                details={"key": (e.details or {}).get("keyValue")},
            ) from e
        except UNAVAILABLE_EXCEPTIONS as e:
            logger.error(f"MongoDB unavailable during {func.__name__} on {self.collection.name}: {e}")
            raise UnavailableError(str(e), service="mongodb") from e

    return wrapper  # type: ignore


class DocumentRepository(Generic[T]):
    """
    CRUD engine for one collection of one entity type.

    Entity repositories hold an instance of this class and delegate to it.
    Every lookup or mutation that matches nothing raises NotFoundError;
    find_many returns an empty list instead.
    """

    def __init__(self, collection: Collection, model_class: Type[T]):
        self.collection = collection
        self.model_class = model_class

    @_translate_store_errors
    def create(self, fields: Union[T, Mapping[str, Any]]) -> T:
        """Insert a document and return it with its assigned id"""
        if isinstance(fields, BaseEntity):
            entity = fields
        else:
            if "id" in fields or "_id" in fields:
                raise ValueError("id is assigned by the repository")
            entity = self.model_class.model_validate(dict(fields))
        if entity.id is not None:
            raise ValueError("id is assigned by the repository")

        doc = entity.to_document()
        doc["_id"] = ObjectId()
        self.collection.insert_one(doc)
        # Read back what the store kept: datetimes lose sub-millisecond precision
        stored = self.collection.find_one({"_id": doc["_id"]})
        return self._require(stored, {"id": doc["_id"]})

    @_translate_store_errors
    def find_one(self, query: Filter) -> T:
        """Find the first document matching the filter"""
        doc = self.collection.find_one(self._to_query(query))
        return self._require(doc, query)

    @_translate_store_errors
    def find_many(self, query: Optional[Filter] = None) -> List[T]:
        """Find every document matching the filter, in no particular order"""
        return [self._to_model(doc) for doc in self.collection.find(self._to_query(query or {}))]

    @_translate_store_errors
    def find_one_and_update(self, query: Filter, updates: Mapping[str, Any]) -> T:
        """
        Atomically apply a partial update to one matching document.

        Args:
            query: Filter to find the document
            updates: Fields to set; fields not named keep their stored values

        Returns:
            The document after the update
        """
        if not updates:
            raise ValueError("No fields to update")
        if "id" in updates or "_id" in updates:
            raise ValueError("id is immutable")

        doc = self.collection.find_one_and_update(
            self._to_query(query),
            {"$set": dict(updates)},
            return_document=ReturnDocument.AFTER,
        )
        return self._require(doc, query)

    @_translate_store_errors
    def find_one_and_delete(self, query: Filter) -> T:
        """Atomically remove one matching document and return it as it was"""
        doc = self.collection.find_one_and_delete(self._to_query(query))
        return self._require(doc, query)

    @_translate_store_errors
    def exists(self, query: Filter) -> bool:
        """Check whether any document matches the filter"""
        return self.collection.find_one(self._to_query(query), projection={"_id": 1}) is not None

    def _require(self, doc: Optional[Dict[str, Any]], query: Filter) -> T:
        if doc is None:
            logger.debug(f"No {self.collection.name} document for filter {dict(query)}")
            raise NotFoundError(
                f"{self.model_class.__name__} not found",
                details={"filter": {k: str(v) for k, v in query.items()}},
            )
        return self._to_model(doc)

    def _to_model(self, doc: Dict[str, Any]) -> T:
        return self.model_class.model_validate(doc)

    @staticmethod
    def _to_query(query: Filter) -> Dict[str, Any]:
        """Translate the public `id` key to Mongo's `_id`."""
        translated = dict(query)
        if "id" in translated:
            translated["_id"] = _to_object_id(translated.pop("id"))
        return translated


def _to_object_id(value: Any) -> Any:
    """
    Convert id filter values to ObjectId, including inside operators.

    Strings that are not valid ObjectIds are left alone: stored ids are always
    ObjectIds, so such a filter matches nothing instead of failing.
    """
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    if isinstance(value, Mapping):
        return {op: _to_object_id(v) for op, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_object_id(v) for v in value]
    return value
