"""Key/value storage for session and shipment records."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shedload.db.models import StoredItem

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the underlying store cannot be read or written."""


class DurableStorage:
    """Async key/value store of JSON text.

    Every method opens its own session, so callers never hold a connection
    between operations.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None."""
        try:
            async with self._session_factory() as session:
                item = await session.get(StoredItem, key)
                return item.value if item else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        try:
            async with self._session_factory() as session:
                item = await session.get(StoredItem, key)
                if item:
                    item.value = value
                else:
                    session.add(StoredItem(key=key, value=value))
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    async def remove_item(self, key: str) -> None:
        """Delete the value stored under key. Missing keys are ignored."""
        try:
            async with self._session_factory() as session:
                item = await session.get(StoredItem, key)
                if item:
                    await session.delete(item)
                    await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e
