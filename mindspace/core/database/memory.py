"""
Встроенное хранилище документов устройства.

Хранит коллекции в памяти процесса и соблюдает те же гарантии, что и
MongoDB-адаптер: атомарность отдельной операции и уникальные (в том числе
частичные) индексы.
"""
import asyncio
import copy
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mindspace.core.database.store import KEY_FIELD, DocumentStore
from mindspace.core.exceptions.store import DuplicateError, QueryError

logger = logging.getLogger(__name__)


class _UniqueIndex:
    """Описание уникального индекса коллекции."""

    def __init__(self, name: str, fields: Sequence[str], partial_filter: Optional[Dict[str, Any]] = None):
        self.name = name
        self.fields = tuple(fields)
        self.partial_filter = partial_filter or {}

    def covers(self, record: Dict[str, Any]) -> bool:
        return all(record.get(field) == value for field, value in self.partial_filter.items())

    def key_of(self, record: Dict[str, Any]) -> Tuple[Any, ...]:
        return tuple(record.get(field) for field in self.fields)


class InMemoryDocumentStore(DocumentStore):
    """
    Хранилище документов в памяти.

    Записи копируются на входе и на выходе, поэтому вызывающий код работает
    со снимками и не может изменить хранилище в обход update().
    """

    backend = "memory"

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._indexes: Dict[str, Dict[str, _UniqueIndex]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _check_unique(self, collection: str, record: Dict[str, Any]) -> None:
        for index in self._indexes.get(collection, {}).values():
            if not index.covers(record):
                continue
            key = index.key_of(record)
            for other_key, other in self._collection(collection).items():
                if other_key == record.get(KEY_FIELD):
                    continue
                if index.covers(other) and index.key_of(other) == key:
                    raise DuplicateError(
                        f"Duplicate key for index {index.name}",
                        collection=collection,
                        index_name=index.name,
                        fields=list(index.fields),
                        source=self.backend
                    )

    async def get_by_key(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        record = self._collection(collection).get(str(key))
        return copy.deepcopy(record) if record is not None else None

    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(record) for record in self._collection(collection).values()]

    async def get_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        return [
            copy.deepcopy(record)
            for record in self._collection(collection).values()
            if record.get(field) == value
        ]

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        async with self._lock:
            document = copy.deepcopy(record)
            key = str(document.get(KEY_FIELD) or uuid.uuid4().hex)
            if key in self._collection(collection):
                raise DuplicateError(
                    f"Document {key} already exists",
                    collection=collection,
                    index_name="_id_",
                    fields=[KEY_FIELD],
                    source=self.backend
                )
            document[KEY_FIELD] = key
            self._check_unique(collection, document)
            self._collection(collection)[key] = document
            return key

    async def update(self, collection: str, record: Dict[str, Any]) -> bool:
        key = record.get(KEY_FIELD)
        if not key:
            raise QueryError(
                "Cannot update a record without a key",
                collection=collection,
                operation="update",
                source=self.backend
            )
        async with self._lock:
            if str(key) not in self._collection(collection):
                return False
            document = copy.deepcopy(record)
            document[KEY_FIELD] = str(key)
            self._check_unique(collection, document)
            self._collection(collection)[str(key)] = document
            return True

    async def delete(self, collection: str, key: str) -> bool:
        async with self._lock:
            return self._collection(collection).pop(str(key), None) is not None

    async def create_unique_index(
        self,
        collection: str,
        fields: Sequence[str],
        name: str,
        partial_filter: Optional[Dict[str, Any]] = None
    ) -> None:
        indexes = self._indexes.setdefault(collection, {})
        if name in indexes:
            logger.debug(f"Index '{name}' already exists in collection {collection}")
            return
        indexes[name] = _UniqueIndex(name, fields, partial_filter)
        logger.info(f"Created index '{name}' in collection {collection}")
