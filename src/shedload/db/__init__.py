"""Database package."""

from shedload.db.database import async_session, init_db
from shedload.db.models import Base, StoredItem
from shedload.db.storage import DurableStorage, StorageError

__all__ = ["Base", "DurableStorage", "StorageError", "StoredItem", "async_session", "init_db"]
