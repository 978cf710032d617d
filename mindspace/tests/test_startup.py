from unittest.mock import AsyncMock

import pytest

from mindspace.config import settings
from mindspace.core.database import mongodb, startup
from mindspace.core.database.indexes import MOODS_COLLECTION
from mindspace.core.database.memory import InMemoryDocumentStore
from mindspace.core.exceptions.store import ConnectionError, DuplicateError


@pytest.fixture(autouse=True)
def reset_store():
    startup.set_store(None)
    yield
    startup.set_store(None)


class TestInitStore:
    """Тесты инициализации хранилища"""

    async def test_memory_backend_with_indexes(self):
        store = await startup.init_store("memory")

        assert isinstance(store, InMemoryDocumentStore)
        await store.insert(MOODS_COLLECTION, {"user_id": "u1", "date": "2024-03-13"})
        with pytest.raises(DuplicateError):
            await store.insert(MOODS_COLLECTION, {"user_id": "u1", "date": "2024-03-13"})

    async def test_mongodb_unavailable_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setattr(mongodb, "connect_to_mongodb", AsyncMock(side_effect=ConnectionError("down")))

        store = await startup.init_store("mongodb")

        assert store.backend == "memory"

    async def test_get_store_initializes_lazily(self):
        store = await startup.get_store()
        assert await startup.get_store() is store

    async def test_check_connection(self):
        await startup.init_store("memory")

        success, message = await startup.check_store_connection()

        assert success
        assert "memory" in message

    async def test_close_store(self):
        await startup.init_store("memory")
        await startup.close_store()
        assert startup._store is None

    async def test_missing_mongodb_url_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setattr(settings.mongodb, "MONGODB_URL", "")

        store = await startup.init_store("mongodb")

        assert store.backend == "memory"

    async def test_missing_mongodb_url_is_connection_error(self, monkeypatch):
        monkeypatch.setattr(settings.mongodb, "MONGODB_URL", "")

        with pytest.raises(ConnectionError):
            await mongodb.connect_to_mongodb()
