"""MongoDB index management utilities.

Index creation with conflict resolution, used by each MongoXxxRepository.
"""

from logging import getLogger

from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing an existing one that clashes with it.

    A clash is an index with the same name but other keys, or the same keys
    under another name. The clashing index is dropped and recreated.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    conflicting = _find_conflicting_index(collection, keys, name)
    if conflicting is None:
        logger.error(f"Failed to resolve index conflict for {name}")
        return False

    logger.warning(f"Dropping conflicting index: {conflicting}")
    collection.drop_index(conflicting)
    collection.create_index(keys, name=name, **kwargs)
    logger.info(f"Recreated index: {name}")
    return True


def _find_conflicting_index(collection, keys: list, name: str) -> str | None:
    wanted = dict(keys)
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        existing = dict(idx_info.get('key', []))
        if (idx_name == name) != (existing == wanted):
            return idx_name
    return None


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.deposit_repository import MongoDepositRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoDepositRepository(db).ensure_indexes(),
    ]
    return all(results)
