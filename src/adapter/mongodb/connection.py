import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO/DEBUG
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/neurosense')
# Explicit override; otherwise the database named in MONGO_URI is used
DATABASE_NAME = os.getenv('MONGODB_DATABASE')
DEFAULT_DATABASE_NAME = 'neurosense'
USERS_COLLECTION_NAME = 'users'

_client_cache = None
_connection_attempted = False
_connection_failed = False


def reset_client():
    global _client_cache, _connection_attempted, _connection_failed
    _client_cache = None
    _connection_attempted = False
    _connection_failed = False


def get_mongodb_client() -> MongoClient | None:
    """Get MongoDB client with connection caching and reconnection logic.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. If cached client fails, attempt reconnection
    3. If initial connection failed (config issue), don't retry

    Returns:
        MongoDB client or None if connection fails
    """
    global _client_cache, _connection_attempted, _connection_failed

    if _client_cache:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            _client_cache = None
            logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")

    if _connection_failed:
        return None

    try:
        client = MongoClient(
            MONGO_URI,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            minPoolSize=0,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')

        is_first_connection = not _connection_attempted
        _connection_attempted = True
        _client_cache = client

        if is_first_connection:
            logger.info("[MONGODB] Connected successfully", extra={"database": get_database(client).name})

        return client
    except (ConnectionFailure, PyMongoError) as e:
        if not _connection_attempted:
            logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
            _connection_failed = True
        return None


def get_database(client: MongoClient) -> Database:
    """Resolve the application database: MONGODB_DATABASE, then the URI path, then the default."""
    if DATABASE_NAME:
        return client[DATABASE_NAME]
    return client.get_default_database(default=DEFAULT_DATABASE_NAME)
