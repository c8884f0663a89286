"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from recruitmatch.core.exceptions import StorageError
from recruitmatch.data.database import get_database_manager
from recruitmatch.data.models.base import BaseDocument
from recruitmatch.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)

SortSpec = list[tuple[str, int]]


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common asynchronous database operations.

    Subclasses must define the collection name and model class. A database
    handle may be injected; otherwise the global DatabaseManager is used.
    Driver failures are re-raised as StorageError.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self, database: Optional[Any] = None) -> None:
        """Initialize repository with an optional database handle."""
        self._database = database

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_async_collection(self) -> AsyncIOMotorCollection:
        """Get asynchronous collection instance."""
        if self._database is not None:
            return self._database[self.collection_name]
        return get_database_manager().get_async_collection(self.collection_name)

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """Translate driver errors into StorageError."""
        try:
            yield
        except PyMongoError as e:
            logger.error(f"{self.collection_name}.{operation} failed: {e}")
            raise StorageError(f"{operation} on {self.collection_name} failed", e) from e

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> ObjectId:
        """Convert string to ObjectId if needed."""
        if isinstance(id_value, ObjectId):
            return id_value
        return ObjectId(id_value)

    @staticmethod
    def is_valid_id(id_value: Any) -> bool:
        """Check whether a value can be used as a document id."""
        if isinstance(id_value, ObjectId):
            return True
        return isinstance(id_value, str) and ObjectId.is_valid(id_value)

    # -------------------------------------------------------------------------
    # Asynchronous CRUD Operations
    # -------------------------------------------------------------------------

    async def create_async(self, model: T) -> T:
        """Create a new document asynchronously."""
        collection = self._get_async_collection()
        document = self._to_document(model)
        now = datetime.utcnow()
        document["created_at"] = now
        document["updated_at"] = now

        with self._storage_errors("insert"):
            result = await collection.insert_one(document)
        model.id = result.inserted_id
        model.created_at = now
        model.updated_at = now
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    async def get_by_id_async(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID; malformed IDs resolve to None."""
        try:
            object_id = self._to_object_id(id_value)
        except (InvalidId, TypeError):
            return None

        collection = self._get_async_collection()
        with self._storage_errors("find_one"):
            document = await collection.find_one({"_id": object_id})
        return self._to_model(document)

    async def get_by_ids_async(self, ids: Iterable[str | ObjectId]) -> dict[ObjectId, T]:
        """Get several documents in one query, keyed by ID; missing IDs are left out."""
        object_ids = list({self._to_object_id(id_value) for id_value in ids})
        if not object_ids:
            return {}

        collection = self._get_async_collection()
        with self._storage_errors("find"):
            documents = await collection.find({"_id": {"$in": object_ids}}).to_list(
                length=len(object_ids)
            )
        return {model.id: model for model in self._to_models(documents)}

    async def find_async(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort: Optional[SortSpec] = None,
    ) -> list[T]:
        """Find documents matching a query asynchronously."""
        collection = self._get_async_collection()
        cursor = collection.find(query)
        cursor = cursor.sort(sort or [("created_at", DESCENDING)])
        cursor = cursor.skip(skip).limit(limit)

        with self._storage_errors("find"):
            documents = await cursor.to_list(length=limit)
        return self._to_models(documents)

    async def find_one_async(self, query: dict[str, Any]) -> Optional[T]:
        """Find a single document matching a query asynchronously."""
        collection = self._get_async_collection()
        with self._storage_errors("find_one"):
            document = await collection.find_one(query)
        return self._to_model(document)

    async def update_async(
        self, id_value: str | ObjectId, update_data: dict[str, Any]
    ) -> Optional[T]:
        """Update a document by ID; returns None when the ID does not resolve."""
        collection = self._get_async_collection()
        update_data["updated_at"] = datetime.utcnow()

        with self._storage_errors("update"):
            result = await collection.update_one(
                {"_id": self._to_object_id(id_value)},
                {"$set": update_data},
            )

        if result.matched_count == 0:
            return None
        logger.debug(f"Updated {self.collection_name} document: {id_value}")
        return await self.get_by_id_async(id_value)

    async def count_async(self, query: Optional[dict[str, Any]] = None) -> int:
        """Count documents matching a query asynchronously."""
        collection = self._get_async_collection()
        with self._storage_errors("count"):
            return await collection.count_documents(query or {})

    async def iter_all_async(
        self,
        page_size: int = 200,
        query: Optional[dict[str, Any]] = None,
    ) -> AsyncIterator[T]:
        """
        Iterate over every matching document in ascending ``_id`` order.

        Pages are fetched with keyset pagination so only one page is held
        in memory at a time.
        """
        collection = self._get_async_collection()
        last_id: Optional[ObjectId] = None

        while True:
            page_query = dict(query or {})
            if last_id is not None:
                page_query["_id"] = {"$gt": last_id}

            cursor = collection.find(page_query).sort([("_id", ASCENDING)]).limit(page_size)
            with self._storage_errors("find"):
                documents = await cursor.to_list(length=page_size)

            # Convert one at a time so a bad document surfaces at its position
            for document in documents:
                yield self._to_model(document)

            if len(documents) < page_size:
                return
            last_id = documents[-1]["_id"]
