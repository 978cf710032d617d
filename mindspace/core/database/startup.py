"""
Инициализация хранилища при запуске приложения.
"""
import logging
from typing import Optional

from mindspace.config import settings
from mindspace.core.database.indexes import setup_indexes
from mindspace.core.database.memory import InMemoryDocumentStore
from mindspace.core.database.store import DocumentStore
from mindspace.core.exceptions.store import StoreError

logger = logging.getLogger(__name__)

# Текущее хранилище приложения
_store: Optional[DocumentStore] = None


async def init_store(backend: Optional[str] = None) -> DocumentStore:
    """
    Создает хранилище выбранного типа и настраивает индексы.

    Если MongoDB недоступна, приложение продолжает работу со встроенным
    хранилищем.
    """
    global _store
    backend = backend or settings.STORE_BACKEND

    if backend == "mongodb":
        from mindspace.core.database.mongodb import connect_to_mongodb
        try:
            _store = await connect_to_mongodb()
        except StoreError as e:
            logger.warning(f"Using in-memory store due to MongoDB connection error: {e}")
            _store = InMemoryDocumentStore()
    else:
        _store = InMemoryDocumentStore()

    await setup_indexes(_store)
    logger.info(f"Document store initialized: {_store.backend}")
    return _store


async def get_store() -> DocumentStore:
    """
    Зависимость для FastAPI, предоставляющая хранилище документов.
    """
    global _store
    if _store is None:
        _store = await init_store()
    return _store


def set_store(store: Optional[DocumentStore]) -> None:
    """Подменяет текущее хранилище (используется в тестах и при встраивании)."""
    global _store
    _store = store


async def close_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None


async def check_store_connection() -> tuple[bool, str]:
    """
    Проверяет доступность хранилища.
    Возвращает кортеж (успех, сообщение)
    """
    store = await get_store()
    if await store.ping():
        return True, f"Store '{store.backend}' is available"
    return False, f"Store '{store.backend}' is unavailable"
