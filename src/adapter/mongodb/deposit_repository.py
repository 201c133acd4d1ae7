"""MongoDB implementation of DepositRepository."""

from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import DEPOSITS_COLLECTION_NAME, USERS_COLLECTION_NAME
from domain.model.deposit import Deposit
from domain.model.errors import DomainError
from domain.model.report import DepositWithUser

logger = getLogger(__name__)


def deposit_from_doc(doc: dict) -> Deposit:
    """Convert MongoDB document to Deposit domain model."""
    return Deposit(
        id=doc['_id'],
        user_id=doc['user_id'],
        amount=doc['amount'],
        month=doc['month'],
        year=doc['year'],
        month_name=doc.get('month_name'),
        added_by=doc.get('added_by', 'admin'),
        created_at=doc['created_at'],
        updated_at=doc['updated_at'],
    )


class MongoDepositRepository:
    def __init__(self, db: Database):
        self.collection = db[DEPOSITS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for deposits collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection, [('user_id', 1), ('month', 1)], 'idx_deposits_user_month', unique=True,
            )
            create_index_safe(
                self.collection, [('user_id', 1), ('year', -1), ('month', -1)], 'idx_deposits_user_period',
            )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_deposits_created_at')
            return True
        except Exception as e:
            logger.error("Failed to create deposits indexes", extra={"error": str(e)})
            return False

    # ── write operations ─────────────────────────────────────

    def add_or_accumulate(self, deposit: Deposit) -> tuple[Deposit, bool]:
        """Upsert with ``$inc`` so concurrent postings for one month never lose an amount.

        Two first-time upserts for the same (user_id, month) can race on the
        unique index; the loser retries once and lands on the increment path.
        """
        query = {'user_id': deposit.user_id, 'month': deposit.month}
        update = {
            '$inc': {'amount': deposit.amount},
            '$set': {'updated_at': datetime.now(timezone.utc)},
            '$setOnInsert': {
                '_id': deposit.id,
                'year': deposit.year,
                'month_name': deposit.month_name,
                'added_by': deposit.added_by,
                'created_at': deposit.created_at,
            },
        }
        try:
            try:
                doc = self._upsert(query, update)
            except DuplicateKeyError:
                logger.debug("Concurrent deposit upsert, retrying", extra=query)
                doc = self._upsert(query, update)
        except PyMongoError as e:
            logger.error("Failed to save deposit", extra={**query, "error": str(e)})
            raise DomainError("Failed to save deposit") from e

        created = doc['_id'] == deposit.id
        logger.info(
            "Deposit created" if created else "Deposit accumulated",
            extra={"depositId": doc['_id'], "userId": deposit.user_id, "month": deposit.month, "amount": doc['amount']},
        )
        return deposit_from_doc(doc), created

    def _upsert(self, query: dict, update: dict) -> dict:
        return self.collection.find_one_and_update(
            query, update, upsert=True, return_document=ReturnDocument.AFTER,
        )

    def update_amount(self, deposit_id: str, amount: float) -> Deposit | None:
        try:
            doc = self.collection.find_one_and_update(
                {'_id': deposit_id},
                {'$set': {'amount': amount, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update deposit", extra={"depositId": deposit_id, "error": str(e)})
            raise DomainError("Failed to update deposit") from e
        return deposit_from_doc(doc) if doc else None

    def delete(self, deposit_id: str) -> bool:
        try:
            result = self.collection.delete_one({'_id': deposit_id})
        except PyMongoError as e:
            logger.error("Failed to delete deposit", extra={"depositId": deposit_id, "error": str(e)})
            raise DomainError("Failed to delete deposit") from e
        return result.deleted_count > 0

    # ── read operations ──────────────────────────────────────

    def list_all_with_users(self) -> list[DepositWithUser]:
        from adapter.mongodb.user_repository import user_from_doc

        pipeline = [
            {'$sort': {'created_at': -1}},
            {'$lookup': {
                'from': USERS_COLLECTION_NAME,
                'localField': 'user_id',
                'foreignField': 'user_id',
                'as': 'user',
            }},
        ]
        try:
            results = []
            for doc in self.collection.aggregate(pipeline):
                matches = doc.get('user') or []
                results.append(DepositWithUser(
                    deposit=deposit_from_doc(doc),
                    user=user_from_doc(matches[0]) if matches else None,
                ))
            return results
        except PyMongoError as e:
            logger.error("Failed to list deposits", extra={"error": str(e)})
            raise DomainError("Failed to list deposits") from e

    def list_by_user(self, user_id: str) -> list[Deposit]:
        try:
            cursor = self.collection.find({'user_id': user_id}).sort([('year', -1), ('month', -1)])
            return [deposit_from_doc(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list user deposits", extra={"userId": user_id, "error": str(e)})
            raise DomainError("Failed to list deposits") from e

    def sum_amount(self, month: str | None = None) -> float:
        pipeline = []
        if month is not None:
            pipeline.append({'$match': {'month': month}})
        pipeline.append({'$group': {'_id': None, 'total': {'$sum': '$amount'}}})
        try:
            rows = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to sum deposits", extra={"month": month, "error": str(e)})
            raise DomainError("Failed to sum deposits") from e
        return rows[0]['total'] if rows else 0
