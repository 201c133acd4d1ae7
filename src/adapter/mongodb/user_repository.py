"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import DEPOSITS_COLLECTION_NAME, USERS_COLLECTION_NAME
from adapter.mongodb.deposit_repository import deposit_from_doc
from domain.model.errors import DomainError, DuplicateError
from domain.model.report import UserWithDeposits
from domain.model.user import DEFAULT_IMAGE_URL, User

logger = getLogger(__name__)


def user_from_doc(doc: dict) -> User:
    """Convert MongoDB document to User domain model."""
    return User(
        id=doc['_id'],
        user_id=doc['user_id'],
        name=doc['name'],
        email=doc['email'],
        contact=doc['contact'],
        image=doc.get('image', DEFAULT_IMAGE_URL),
        is_active=doc.get('is_active', True),
        created_at=doc['created_at'],
        updated_at=doc['updated_at'],
    )


def _duplicate_key(error: DuplicateKeyError) -> str | None:
    """Name the field that tripped a unique index, if the server reported it."""
    pattern = (error.details or {}).get('keyPattern') or {}
    return next(iter(pattern), None)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('user_id', 1)], 'idx_users_user_id', unique=True)
            create_index_safe(
                self.collection, [('email', 1)], 'idx_users_active_email',
                unique=True, partialFilterExpression={'is_active': True},
            )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── write operations ─────────────────────────────────────

    def create(self, user_id: str, name: str, email: str, contact: str, image: str) -> User:
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': uuid.uuid4().hex,
            'user_id': user_id,
            'name': name,
            'email': email,
            'contact': contact,
            'image': image,
            'is_active': True,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            key = _duplicate_key(e)
            logger.warning("User creation hit unique index", extra={"userId": user_id, "key": key})
            raise DuplicateError("Email already exists" if key == 'email' else "User ID already exists", key=key)
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"userId": user_id, "error": str(e)})
            raise DomainError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return user_from_doc(user_doc)

    def update(self, user_id: str, name: str, email: str, contact: str, image: str) -> User | None:
        try:
            doc = self.collection.find_one_and_update(
                {'user_id': user_id, 'is_active': True},
                {'$set': {
                    'name': name,
                    'email': email,
                    'contact': contact,
                    'image': image,
                    'updated_at': datetime.now(timezone.utc),
                }},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateError("Email already exists", key=_duplicate_key(e))
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise DomainError("Failed to update user") from e
        return user_from_doc(doc) if doc else None

    def deactivate(self, user_id: str) -> bool:
        try:
            result = self.collection.update_one(
                {'user_id': user_id, 'is_active': True},
                {'$set': {'is_active': False, 'updated_at': datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            logger.error("Failed to deactivate user", extra={"userId": user_id, "error": str(e)})
            raise DomainError("Failed to delete user") from e
        return result.modified_count > 0

    # ── read operations ──────────────────────────────────────

    def get_by_user_id(self, user_id: str, active_only: bool = True) -> User | None:
        query = {'user_id': user_id}
        if active_only:
            query['is_active'] = True
        doc = self._find_one(query)
        return user_from_doc(doc) if doc else None

    def get_active_by_email(self, email: str) -> User | None:
        doc = self._find_one({'email': email, 'is_active': True})
        return user_from_doc(doc) if doc else None

    def exists_user_id(self, user_id: str) -> bool:
        return self._find_one({'user_id': user_id}) is not None

    def list_active(self) -> list[User]:
        try:
            cursor = self.collection.find({'is_active': True}).sort('created_at', -1)
            return [user_from_doc(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            raise DomainError("Failed to list users") from e

    def count_active(self) -> int:
        try:
            return self.collection.count_documents({'is_active': True})
        except PyMongoError as e:
            logger.error("Failed to count users", extra={"error": str(e)})
            raise DomainError("Failed to count users") from e

    def list_active_with_deposits(self) -> list[UserWithDeposits]:
        pipeline = [
            {'$match': {'is_active': True}},
            {'$sort': {'created_at': -1}},
            {'$lookup': {
                'from': DEPOSITS_COLLECTION_NAME,
                'localField': 'user_id',
                'foreignField': 'user_id',
                'as': 'deposits',
            }},
        ]
        try:
            return [
                UserWithDeposits(
                    user=user_from_doc(doc),
                    deposits=[deposit_from_doc(d) for d in doc.get('deposits', [])],
                )
                for doc in self.collection.aggregate(pipeline)
            ]
        except PyMongoError as e:
            logger.error("Failed to aggregate users with deposits", extra={"error": str(e)})
            raise DomainError("Failed to load users with deposits") from e

    def _find_one(self, query: dict) -> dict | None:
        try:
            return self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to get user", extra={"query": str(query), "error": str(e)})
            raise DomainError("Failed to get user") from e
