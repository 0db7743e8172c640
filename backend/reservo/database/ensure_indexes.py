"""MongoDB indexes the services rely on for correctness."""

import logging

from pymongo.database import Database
from pymongo.errors import OperationFailure

from reservo.repositories.user import UserRepository

logger = logging.getLogger(__name__)

# (collection, keys, options)
INDEXES = [
    # Closes the window between the email existence check and the insert
    (UserRepository.collection_name, [("email", 1)], {"unique": True, "name": "email_unique"}),
]


def ensure_indexes(db: Database) -> None:
    """Create every index in INDEXES. Run on auth service startup."""
    for collection_name, keys, options in INDEXES:
        try:
            db[collection_name].create_index(keys, **options)
            logger.debug(f"Ensured index {options['name']} on {collection_name}")
        except OperationFailure as e:
            # An index with the same name but different options is left in place
            if "already exists" not in str(e):
                logger.warning(f"Failed to create index {options['name']} on {collection_name}: {e}")
    logger.info("Database indexes ensured")
