"""Startup index setup for the users collection.

Databases created by the old Node server carry a Mongoose-built ``email_1``
unique index. Creating ``idx_users_email`` on the same key fails with an
options conflict, so clashing indexes are dropped and rebuilt under the
names below.
"""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import OperationFailure

logger = getLogger(__name__)

# (keys, name, options)
USER_INDEXES = (
    ([('email', 1)], 'idx_users_email', {'unique': True}),
    ([('created_at', -1)], 'idx_users_created_at', {}),
)

# IndexOptionsConflict, IndexKeySpecsConflict
_CONFLICT_CODES = {85, 86}


def _is_conflict(error: OperationFailure) -> bool:
    return error.code in _CONFLICT_CODES or 'already exists' in str(error)


def _find_clashes(collection: Collection, keys: list, name: str) -> list[str]:
    """Names of existing indexes sharing the wanted name or key pattern."""
    wanted = dict(keys)
    clashes = []
    for index_name, info in collection.index_information().items():
        if index_name == '_id_':
            continue
        if index_name == name or dict(info.get('key', [])) == wanted:
            clashes.append(index_name)
    return clashes


def create_index_safe(collection: Collection, keys: list, name: str, **options) -> bool:
    """Create an index, replacing any existing index it conflicts with.

    Returns False when the server reports a conflict but no clashing index
    can be found. Errors other than conflicts propagate.
    """
    try:
        collection.create_index(keys, name=name, **options)
        return True
    except OperationFailure as e:
        if not _is_conflict(e):
            raise

    clashes = _find_clashes(collection, keys, name)
    if not clashes:
        logger.error("Index conflict with no matching index", extra={"index": name})
        return False

    for clash in clashes:
        logger.warning("Dropping conflicting index", extra={"index": clash, "replacement": name})
        collection.drop_index(clash)
    collection.create_index(keys, name=name, **options)
    logger.info("Recreated index", extra={"index": name})
    return True


def ensure_user_indexes(collection: Collection) -> bool:
    """Create every users index; True only if all of them are in place."""
    results = [create_index_safe(collection, keys, name, **options) for keys, name, options in USER_INDEXES]
    return all(results)


def ensure_all_indexes(db) -> bool:
    """Called from the app lifespan once a client is available."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
