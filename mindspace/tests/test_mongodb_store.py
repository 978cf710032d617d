from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect, ConnectionFailure, DuplicateKeyError, OperationFailure

from mindspace.core.database import retry
from mindspace.core.database.mongodb import MongoDocumentStore
from mindspace.core.exceptions.store import ConnectionError, DuplicateError, QueryError


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def mongo_store(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    database.command = AsyncMock(return_value={"ok": 1})
    client = MagicMock()
    return MongoDocumentStore(database, client)


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr(retry.asyncio, "sleep", AsyncMock())


class TestMongoDocumentStore:
    """Тесты адаптера MongoDB на замоканных коллекциях"""

    async def test_get_by_key_maps_object_id(self, mongo_store, collection):
        oid = ObjectId()
        collection.find_one = AsyncMock(return_value={"_id": oid, "user_id": "u1"})

        record = await mongo_store.get_by_key("moods", str(oid))

        assert record == {"id": str(oid), "user_id": "u1"}
        collection.find_one.assert_awaited_once_with({"_id": oid})

    async def test_get_by_invalid_key(self, mongo_store, collection):
        collection.find_one = AsyncMock()

        assert await mongo_store.get_by_key("moods", "not-an-object-id") is None
        collection.find_one.assert_not_awaited()

    async def test_get_by_field(self, mongo_store, collection):
        oid = ObjectId()
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=[{"_id": oid, "user_id": "u1"}])
        collection.find = MagicMock(return_value=cursor)

        records = await mongo_store.get_by_field("moods", "user_id", "u1")

        assert records == [{"id": str(oid), "user_id": "u1"}]
        collection.find.assert_called_once_with({"user_id": "u1"})

    async def test_insert_assigns_object_id(self, mongo_store, collection):
        collection.insert_one = AsyncMock()

        key = await mongo_store.insert("moods", {"id": None, "user_id": "u1"})

        document = collection.insert_one.await_args.args[0]
        assert document == {"_id": ObjectId(key), "user_id": "u1"}

    async def test_duplicate_key_is_translated(self, mongo_store, collection):
        error = DuplicateKeyError(
            "E11000 duplicate key", 11000, {"keyPattern": {"user_id": 1, "date": 1}}
        )
        collection.insert_one = AsyncMock(side_effect=error)
        collection.find_one = AsyncMock(return_value=None)

        with pytest.raises(DuplicateError) as exc_info:
            await mongo_store.insert("moods", {"user_id": "u1", "date": "2024-03-13"})

        assert exc_info.value.fields == ["user_id", "date"]
        # Дубликат не повторяется
        assert collection.insert_one.await_count == 1

    async def test_connection_failure_is_retried(self, mongo_store, collection):
        collection.insert_one = AsyncMock(side_effect=[ConnectionFailure("down"), MagicMock()])

        key = await mongo_store.insert("moods", {"user_id": "u1"})

        assert collection.insert_one.await_count == 2
        first, second = (call.args[0] for call in collection.insert_one.await_args_list)
        assert first["_id"] == second["_id"] == ObjectId(key)

    async def test_insert_applied_before_lost_reply(self, mongo_store, collection):
        """Запись прошла, но ответ потерян: повтор упирается в уникальный индекс"""
        error = DuplicateKeyError(
            "E11000 duplicate key", 11000,
            {"keyPattern": {"therapist_id": 1, "date": 1, "time": 1}}
        )
        collection.insert_one = AsyncMock(side_effect=[AutoReconnect("reply lost"), error])
        collection.find_one = AsyncMock(side_effect=lambda query, projection: {"_id": query["_id"]})

        key = await mongo_store.insert(
            "appointments", {"therapist_id": "t1", "date": "2024-03-14", "time": "10:00"}
        )

        assert collection.insert_one.await_count == 2
        written = collection.insert_one.await_args.args[0]
        assert written["_id"] == ObjectId(key)
        collection.find_one.assert_awaited_once_with({"_id": ObjectId(key)}, {"_id": 1})

    async def test_connection_failure_after_all_attempts(self, mongo_store, collection):
        collection.insert_one = AsyncMock(side_effect=ConnectionFailure("down"))

        with pytest.raises(ConnectionError) as exc_info:
            await mongo_store.insert("moods", {"user_id": "u1"})

        assert collection.insert_one.await_count == retry.default_retry_config.max_attempts
        assert exc_info.value.details["retry_attempts"] == retry.default_retry_config.max_attempts

    async def test_operation_failure_is_query_error(self, mongo_store, collection):
        collection.delete_one = AsyncMock(side_effect=OperationFailure("bad", code=2))

        with pytest.raises(QueryError):
            await mongo_store.delete("moods", str(ObjectId()))

    async def test_update(self, mongo_store, collection):
        oid = ObjectId()
        collection.replace_one = AsyncMock(return_value=MagicMock(matched_count=1))

        assert await mongo_store.update("moods", {"id": str(oid), "intensity": 5})
        collection.replace_one.assert_awaited_once_with({"_id": oid}, {"intensity": 5})

    async def test_update_missing(self, mongo_store, collection):
        collection.replace_one = AsyncMock(return_value=MagicMock(matched_count=0))
        assert not await mongo_store.update("moods", {"id": str(ObjectId())})

    async def test_delete(self, mongo_store, collection):
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        assert await mongo_store.delete("moods", str(ObjectId()))

    async def test_create_partial_unique_index(self, mongo_store, collection):
        collection.index_information = AsyncMock(return_value={"_id_": {}})
        collection.create_index = AsyncMock()

        await mongo_store.create_unique_index(
            "appointments", ["therapist_id", "date", "time"],
            name="ux_slot", partial_filter={"slot_active": True}
        )

        collection.create_index.assert_awaited_once_with(
            [("therapist_id", 1), ("date", 1), ("time", 1)],
            name="ux_slot",
            unique=True,
            partialFilterExpression={"slot_active": True}
        )

    async def test_existing_index_is_not_recreated(self, mongo_store, collection):
        collection.index_information = AsyncMock(return_value={"ux_slot": {}})
        collection.create_index = AsyncMock()

        await mongo_store.create_unique_index("appointments", ["time"], name="ux_slot")

        collection.create_index.assert_not_awaited()

    async def test_ping(self, mongo_store):
        assert await mongo_store.ping()

    async def test_close(self, mongo_store):
        await mongo_store.close()
        mongo_store.client.close.assert_called_once()
