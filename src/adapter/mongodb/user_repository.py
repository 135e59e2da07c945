"""MongoDB implementation of UserRepository."""

import uuid
from datetime import date, datetime, time, timezone
from logging import getLogger
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import ensure_user_indexes
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User

logger = getLogger(__name__)


def _birthdate_to_bson(value: date | None) -> datetime | None:
    # BSON has no date-only type
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _birthdate_from_bson(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        try:
            return ensure_user_indexes(self.collection)
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
            phone=doc.get('phone') or '',
            birthdate=_birthdate_from_bson(doc.get('birthdate')),
        )

    def create(self, name: str, email: str, password_hash: str) -> User:
        """Insert a new user. The unique email index decides races between registrations."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'name': name,
            'email': email,
            'password_hash': password_hash,
            'phone': '',
            'birthdate': None,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("User already exists")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to load user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to load user") from e
        return self._to_domain(doc) if doc else None

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Set only the supplied fields. Return the updated User or None if not found."""
        changes = dict(fields)
        if 'birthdate' in changes:
            changes['birthdate'] = _birthdate_to_bson(changes['birthdate'])
        changes['updated_at'] = datetime.now(timezone.utc)

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning("User update failed: email already exists", extra={"userId": user_id})
            raise DuplicateError("Email already in use")
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to update user") from e

        if doc is None:
            return None
        logger.debug("Updated user", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)
