"""
Хранилище документов поверх MongoDB (motor).

Ошибки драйвера транслируются в иерархию mindspace.core.exceptions,
временные ошибки повторяются декоратором with_retry.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError

from mindspace.config import settings
from mindspace.core.database.retry import with_retry
from mindspace.core.database.store import KEY_FIELD, DocumentStore
from mindspace.core.exceptions.store import (
    ConnectionError, DuplicateError, QueryError, StoreError
)

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(collection: str, operation: str) -> Iterator[None]:
    """
    Переводит исключения pymongo в исключения хранилища.
    """
    try:
        yield
    except DuplicateKeyError as e:
        key_pattern = (e.details or {}).get("keyPattern") or {}
        raise DuplicateError(
            "Duplicate key",
            collection=collection,
            fields=list(key_pattern.keys()),
            source="mongodb",
            cause=e
        ) from e
    except ConnectionFailure as e:
        raise ConnectionError(
            f"MongoDB is unavailable during {operation} on {collection}",
            source="mongodb",
            cause=e
        ) from e
    except OperationFailure as e:
        raise QueryError(
            f"MongoDB rejected {operation}",
            collection=collection,
            operation=operation,
            code=str(e.code) if e.code is not None else None,
            source="mongodb",
            cause=e
        ) from e
    except PyMongoError as e:
        raise StoreError.from_exception(e, source="mongodb") from e


def _to_object_id(key: str) -> Optional[ObjectId]:
    try:
        return ObjectId(str(key))
    except (InvalidId, TypeError):
        return None


def _from_mongo(document: Dict[str, Any]) -> Dict[str, Any]:
    """Преобразует _id документа MongoDB в строковое поле id."""
    result = dict(document)
    result[KEY_FIELD] = str(result.pop("_id"))
    return result


def _to_mongo(record: Dict[str, Any]) -> Dict[str, Any]:
    document = dict(record)
    document.pop(KEY_FIELD, None)
    return document


class MongoDocumentStore(DocumentStore):
    """
    Хранилище документов в базе MongoDB.
    """

    backend = "mongodb"

    def __init__(self, database: AsyncIOMotorDatabase, client: Optional[AsyncIOMotorClient] = None):
        self.database = database
        self.client = client

    @with_retry
    async def get_by_key(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        object_id = _to_object_id(key)
        if object_id is None:
            return None
        with _translate_errors(collection, "find_one"):
            document = await self.database[collection].find_one({"_id": object_id})
        return _from_mongo(document) if document else None

    @with_retry
    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        with _translate_errors(collection, "find"):
            documents = await self.database[collection].find({}).to_list(length=None)
        return [_from_mongo(document) for document in documents]

    @with_retry
    async def get_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        with _translate_errors(collection, "find"):
            documents = await self.database[collection].find({field: value}).to_list(length=None)
        return [_from_mongo(document) for document in documents]

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        document = _to_mongo(record)
        # _id назначается до первой попытки, чтобы повтор после потерянного
        # ответа сервера узнал уже записанный документ
        document["_id"] = ObjectId()
        try:
            await self._insert_document(collection, document)
        except DuplicateError:
            if not await self._exists(collection, document["_id"]):
                raise
            logger.info(f"Insert into {collection} was applied before retry, document {document['_id']}")
        return str(document["_id"])

    @with_retry
    async def _insert_document(self, collection: str, document: Dict[str, Any]) -> None:
        with _translate_errors(collection, "insert_one"):
            await self.database[collection].insert_one(document)

    @with_retry
    async def _exists(self, collection: str, object_id: ObjectId) -> bool:
        with _translate_errors(collection, "find_one"):
            document = await self.database[collection].find_one({"_id": object_id}, {"_id": 1})
        return document is not None

    @with_retry
    async def update(self, collection: str, record: Dict[str, Any]) -> bool:
        object_id = _to_object_id(record.get(KEY_FIELD))
        if object_id is None:
            return False
        with _translate_errors(collection, "replace_one"):
            result = await self.database[collection].replace_one({"_id": object_id}, _to_mongo(record))
        return result.matched_count > 0

    @with_retry
    async def delete(self, collection: str, key: str) -> bool:
        object_id = _to_object_id(key)
        if object_id is None:
            return False
        with _translate_errors(collection, "delete_one"):
            result = await self.database[collection].delete_one({"_id": object_id})
        return result.deleted_count > 0

    async def create_unique_index(
        self,
        collection: str,
        fields: Sequence[str],
        name: str,
        partial_filter: Optional[Dict[str, Any]] = None
    ) -> None:
        options: Dict[str, Any] = {"name": name, "unique": True}
        if partial_filter:
            options["partialFilterExpression"] = partial_filter

        with _translate_errors(collection, "create_index"):
            existing_indexes = await self.database[collection].index_information()
            if name in existing_indexes:
                logger.info(f"Index '{name}' already exists in collection {collection}")
                return
            await self.database[collection].create_index(
                [(field, ASCENDING) for field in fields], **options
            )
        logger.info(f"Created index '{name}' in collection {collection}")

    async def ping(self) -> bool:
        try:
            await self.database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")


async def connect_to_mongodb() -> MongoDocumentStore:
    """
    Устанавливает соединение с MongoDB и возвращает хранилище.

    Raises:
        ConnectionError: URL не задан или сервер MongoDB недоступен
        StoreError: URL задан с ошибкой
    """
    mongodb_url = settings.mongodb.MONGODB_URL
    if not mongodb_url:
        raise ConnectionError("MongoDB URL is not configured", source="mongodb")

    with _translate_errors("admin", "server_info"):
        client = AsyncIOMotorClient(
            mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb.MONGODB_TIMEOUT_MS
        )
        await client.server_info()
    logger.info("Connected to MongoDB successfully")

    return MongoDocumentStore(client[settings.mongodb.MONGODB_DB_NAME], client)
