"""
Базовый репозиторий поверх хранилища документов.
Связывает коллекцию хранилища с pydantic моделью записи.
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from mindspace.core.database.store import KEY_FIELD, DocumentStore

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Базовый класс репозитория с основными операциями над коллекцией.

    Модель должна уметь преобразовываться в документ (to_record) и
    восстанавливаться из него (from_record).
    """

    def __init__(self, store: DocumentStore, collection_name: str, model: Type[ModelType]):
        """
        Args:
            store: хранилище документов
            collection_name: название коллекции
            model: pydantic модель записей коллекции
        """
        self.store = store
        self.collection_name = collection_name
        self.model = model

    def _to_model(self, record: Dict[str, Any]) -> ModelType:
        return self.model.from_record(record)

    async def get_by_id(self, id: str) -> Optional[ModelType]:
        try:
            record = await self.store.get_by_key(self.collection_name, id)
            return self._to_model(record) if record else None
        except Exception as e:
            logger.error(f"Error getting document {id} from {self.collection_name}: {e}")
            raise

    async def get_all(self) -> List[ModelType]:
        try:
            records = await self.store.get_all(self.collection_name)
            return [self._to_model(record) for record in records]
        except Exception as e:
            logger.error(f"Error getting documents from {self.collection_name}: {e}")
            raise

    async def get_by_field(self, field: str, value: Any) -> List[ModelType]:
        try:
            records = await self.store.get_by_field(self.collection_name, field, value)
            return [self._to_model(record) for record in records]
        except Exception as e:
            logger.error(f"Error getting documents by {field} from {self.collection_name}: {e}")
            raise

    async def create(self, obj: ModelType) -> ModelType:
        """
        Сохраняет новую запись и возвращает ее с присвоенным id.

        Raises:
            DuplicateError: запись нарушает уникальный индекс коллекции
        """
        try:
            key = await self.store.insert(self.collection_name, obj.to_record())
            return obj.model_copy(update={"id": key})
        except Exception as e:
            logger.error(f"Error creating document in {self.collection_name}: {e}")
            raise

    async def update(self, obj: ModelType) -> bool:
        """Заменяет сохраненную запись; False, если записи нет."""
        try:
            record = obj.to_record()
            record[KEY_FIELD] = obj.id
            return await self.store.update(self.collection_name, record)
        except Exception as e:
            logger.error(f"Error updating document {obj.id} in {self.collection_name}: {e}")
            raise

    async def delete(self, id: str) -> bool:
        try:
            return await self.store.delete(self.collection_name, id)
        except Exception as e:
            logger.error(f"Error deleting document {id} from {self.collection_name}: {e}")
            raise
