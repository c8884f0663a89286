"""
MongoDB connection management for RecruitMatch.

The Motor client serves the repositories inside the event loop. A small
PyMongo client is kept for operator tasks (ping, index creation) that run
outside any loop, such as the CLI.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from recruitmatch.data.models import Job, Match, Resume
from recruitmatch.utils.config import get_settings
from recruitmatch.utils.logger import get_logger

logger = get_logger(__name__)

# Documents whose Settings.indexes are created by ensure_indexes()
INDEXED_MODELS = (Resume, Job, Match)


class DatabaseManager:
    """
    Holds the process-wide MongoDB clients.

    Clients are created lazily on first use and shared by every repository.
    """

    _instance: Optional["DatabaseManager"] = None
    _sync_client: Optional[MongoClient] = None
    _async_client: Optional[AsyncIOMotorClient] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return

        db_settings = get_settings().database
        self._db_name = db_settings.name
        self._uri = self._build_uri(
            db_settings.host, db_settings.port, db_settings.username, db_settings.password
        )
        self._initialized = True

    @staticmethod
    def _build_uri(
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> str:
        """Build a connection URI; credentials are URL-encoded."""
        host = host.strip()
        if not host or any(c in host for c in ";&|$`/"):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if username and password:
            auth = f"{quote_plus(username)}:{quote_plus(password)}@"
        return f"mongodb://{auth}{host}:{port}"

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def get_async_client(self) -> AsyncIOMotorClient:
        """Get or create the Motor client used by the repositories."""
        if self._async_client is None:
            logger.info("Creating asynchronous MongoDB client")
            self._async_client = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
                minPoolSize=5,
            )
        return self._async_client

    def get_async_database(self) -> AsyncIOMotorDatabase:
        return self.get_async_client()[self._db_name]

    def get_async_collection(self, collection_name: str) -> Any:
        return self.get_async_database()[collection_name]

    def get_sync_client(self) -> MongoClient:
        """Get or create the PyMongo client used by operator tasks."""
        if self._sync_client is None:
            self._sync_client = MongoClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=5,
            )
        return self._sync_client

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def check_sync_connection(self) -> bool:
        """Ping the server from outside an event loop."""
        try:
            self.get_sync_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            self._sync_client = None
            return False

    async def check_async_connection(self) -> bool:
        """Ping the server through the Motor client."""
        try:
            await self.get_async_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

    # -------------------------------------------------------------------------
    # Indexes
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> list[str]:
        """
        Create the indexes declared on each document's ``Settings``.

        ``unique_indexes`` entries are created with ``unique=True``; the one on
        matches guarantees a single match per (job, resume) pair.

        Returns:
            Names of the indexes created or already present
        """
        database = self.get_sync_client()[self._db_name]
        created = []
        for model in INDEXED_MODELS:
            settings = model.Settings
            collection = database[settings.name]
            for keys in getattr(settings, "unique_indexes", []):
                created.append(collection.create_index(keys, unique=True))
            for keys in settings.indexes:
                created.append(collection.create_index(keys))
            logger.debug(f"Indexes ensured on {settings.name}")
        logger.info(f"Ensured {len(created)} indexes")
        return created

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close_all(self) -> None:
        """Close every open client."""
        if self._async_client is not None:
            logger.info("Closing asynchronous MongoDB client")
            self._async_client.close()
            self._async_client = None
        if self._sync_client is not None:
            self._sync_client.close()
            self._sync_client = None


_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
