import os
import logging
import threading
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

logger = logging.getLogger(__name__)

# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'member_deposits')

CONNECT_ATTEMPTS = 5


class MongoConnection:
    """Process-lifetime MongoDB handle.

    Created at application startup, closed at shutdown, and handed to
    repositories through the request dependencies. Startup connects with
    exponential backoff. A lost connection is re-established on the next
    ``get_database()`` call with a single attempt, so a request never waits
    out the backoff; concurrent callers share one reconnect.
    """

    def __init__(self, url: str | None = MONGO_URL, database_name: str = DATABASE_NAME):
        self.url = url
        self.database_name = database_name
        self._client: MongoClient | None = None
        self._lock = threading.Lock()
        # Bumped on every connect attempt; lets waiters see a reconnect happened.
        self._generation = 0

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self, retry: bool = True) -> bool:
        """Open the client and verify it with a ping.

        With ``retry`` the attempt is repeated with exponential backoff.
        Returns False when the URL is missing or every attempt failed.
        """
        with self._lock:
            return self._connect_locked(retry)

    def _connect_locked(self, retry: bool) -> bool:
        self._generation += 1
        if not self.url:
            logger.error("[MONGODB] MONGO_URL not configured.")
            return False

        try:
            self._client = self._connect_with_retry() if retry else self._open_client()
        except (ConnectionFailure, ConfigurationError) as e:
            logger.error("[MONGODB] Connection failed", extra={"error": str(e)[:200]})
            self._client = None
            return False

        logger.info(f"[MONGODB] Connected successfully to {self.database_name}")
        return True

    @retry(
        retry=retry_if_exception_type(ConnectionFailure),
        stop=stop_after_attempt(CONNECT_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _connect_with_retry(self) -> MongoClient:
        return self._open_client()

    def _open_client(self) -> MongoClient:
        client = MongoClient(
            self.url,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            retryWrites=True,
            retryReads=True,
        )
        try:
            client.admin.command('ping')
        except ConnectionFailure:
            client.close()
            raise
        return client

    def ping(self) -> bool:
        return self._ping(self._client)

    @staticmethod
    def _ping(client: MongoClient | None) -> bool:
        if client is None:
            return False
        try:
            client.admin.command('ping')
            return True
        except PyMongoError:
            return False

    def get_database(self) -> Database | None:
        """Return the database, reconnecting once first if the cached client is dead.

        Returns None when the reconnect fails; callers answer 503.
        """
        generation = self._generation
        client = self._client
        if self._ping(client):
            return client[self.database_name]

        with self._lock:
            # Skip when another caller reconnected (or tried to) while this one waited.
            if self._generation == generation and self._client is client:
                if self._client is not None:
                    logger.warning("[MONGODB] Cached client failed ping, reconnecting...")
                    self._close_locked()
                self._connect_locked(retry=False)

            if self._client is None:
                return None
            return self._client[self.database_name]

    def close(self) -> None:
        with self._lock:
            self._close_locked()

    def _close_locked(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("[MONGODB] Connection closed")
