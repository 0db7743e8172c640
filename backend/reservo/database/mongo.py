from __future__ import annotations

"""
MongoDB connection helpers.
"""

import logging

from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from reservo.config import CommonSettings

logger = logging.getLogger(__name__)


def create_client(settings: CommonSettings) -> MongoClient:
    """
    Connect to MongoDB, retrying while the server is not reachable yet.

    PyMongo connects lazily, so the client is pinged to surface an
    unreachable server at startup rather than on the first request.

    Raises:
        pymongo.errors.ConnectionFailure: If every attempt fails
    """

    @retry(
        stop=stop_after_attempt(settings.MONGODB_CONNECT_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception_type(ConnectionFailure),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def connect() -> MongoClient:
        client: MongoClient = MongoClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            tz_aware=True,
        )
        try:
            client.admin.command("ping")
        except ConnectionFailure:
            client.close()
            raise
        return client

    client = connect()
    logger.info(f"Connected to MongoDB database {settings.MONGODB_DB_NAME}")
    return client


def get_database(client: MongoClient, settings: CommonSettings) -> Database:
    return client[settings.MONGODB_DB_NAME]


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the database opened at startup."""
    return request.app.state.db
