import logging

from adapter.mongodb.connection import get_mongodb_client, get_database
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import StorageError
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def _get_db():
    """Get MongoDB database; an unreachable server surfaces as a 500 "Server error"."""
    client = get_mongodb_client()
    if client is None:
        logger.error("MongoDB unavailable for request")
        raise StorageError("Database unavailable")
    return get_database(client)


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())
