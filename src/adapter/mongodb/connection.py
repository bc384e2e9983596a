import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from adapter.mongodb import DEFAULT_DATABASE_NAME

logger = logging.getLogger(__name__)

# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)


class DatabaseConnectionError(Exception):
    """MongoDB could not be reached at startup."""


def connect(mongo_uri: str | None = None, database_name: str | None = None) -> Database:
    """Connect to MongoDB and return the database handle.

    Called once at startup. The connection is verified with a ping; any
    failure is fatal to the caller, there is no retry.

    Args:
        mongo_uri: Connection string, defaults to the MONGO_URI env var
        database_name: Database name, defaults to MONGODB_DATABASE or 'example-db'

    Raises:
        DatabaseConnectionError: URI missing, client creation failed or ping failed
    """
    mongo_uri = mongo_uri or os.getenv('MONGO_URI')
    database_name = database_name or os.getenv('MONGODB_DATABASE', DEFAULT_DATABASE_NAME)

    if not mongo_uri:
        logger.error("[MONGODB] MONGO_URI not configured.")
        raise DatabaseConnectionError("MONGO_URI not set")

    client = None
    try:
        client = MongoClient(
            mongo_uri,
            server_api=ServerApi('1'),
            tz_aware=True,  # joinDate comes back as an aware UTC datetime
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
        )
        client.admin.command('ping')
    except PyMongoError as e:
        if client is not None:
            client.close()
        error_msg = str(e)[:200]
        logger.error(f"[MONGODB] Connection failed: {error_msg}")
        raise DatabaseConnectionError(f"Failed to connect to MongoDB: {error_msg}") from e

    logger.info(f"[MONGODB] Connected successfully to {database_name}")
    return client[database_name]


def close(db: Database) -> None:
    """Close the client behind a database handle."""
    db.client.close()
    logger.info("[MONGODB] Connection closed")
