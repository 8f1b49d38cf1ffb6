"""Tests for durable key/value storage."""

import pytest
from sqlalchemy import text

from shedload.db.storage import DurableStorage, StorageError


class TestDurableStorage:
    """Test get/set/remove semantics."""

    async def test_missing_key(self, storage):
        assert await storage.get_item("nothing-here") is None

    async def test_set_replaces(self, storage):
        await storage.set_item("k", "one")
        await storage.set_item("k", "two")

        assert await storage.get_item("k") == "two"

    async def test_remove(self, storage):
        await storage.set_item("k", "one")
        await storage.remove_item("k")
        await storage.remove_item("k")

        assert await storage.get_item("k") is None

    async def test_database_errors_become_storage_errors(self, session_factory):
        async with session_factory() as session:
            await session.execute(text("DROP TABLE stored_items"))
            await session.commit()

        with pytest.raises(StorageError):
            await DurableStorage(session_factory).get_item("k")
