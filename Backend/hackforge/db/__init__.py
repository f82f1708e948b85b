# hackforge/db/__init__.py
"""
Database module.

Owns the active ProjectStore. It starts as the in-memory store and is swapped
for the MongoDB store once a connection succeeds.
"""
from typing import Optional

from hackforge.core.config import settings
from hackforge.core.logging import log
from hackforge.services.project_store import MemoryProjectStore, MongoProjectStore, ProjectStore

# Motor client instance
_client = None
_db = None
_connection_error: Optional[str] = None
_store: ProjectStore = MemoryProjectStore()


async def connect_db():
    """
    Connect to MongoDB.

    If MONGODB_URI is unset or MongoDB is unreachable, the error is stored
    for the health check and projects stay on the in-memory store.
    """
    global _client, _db, _connection_error, _store

    mongo_url = settings.database.mongodb_uri
    if not mongo_url:
        log("DB", "⚠️ MONGODB_URI not provided. Running without database connection (in-memory projects).")
        _connection_error = "MONGODB_URI not configured"
        return

    try:
        from motor.motor_asyncio import AsyncIOMotorClient
        from beanie import init_beanie
        from pymongo.errors import ConfigurationError
        from hackforge.models import Project

        _client = AsyncIOMotorClient(
            mongo_url,
            serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
        )

        try:
            _db = _client.get_default_database()
        except ConfigurationError:
            _db = _client[settings.database.database_name]

        # Fails fast if MongoDB is not running
        await _client.admin.command("ping")
        log("DB", f"✅ Connected to MongoDB ({_db.name})")

        await init_beanie(database=_db, document_models=[Project])
        log("DB", "✅ Beanie ODM Initialized")

        _store = MongoProjectStore()
        _connection_error = None
    except Exception as e:
        error_msg = str(e)
        log("DB", f"❌ MongoDB not available: {error_msg}")
        log("DB", "ℹ️ Continuing with in-memory project storage.")
        if _client is not None:
            _client.close()
        _client = None
        _db = None
        _connection_error = error_msg


async def disconnect_db():
    """Disconnect from MongoDB."""
    global _client, _db
    if _client:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def get_store() -> ProjectStore:
    """The store project routes should use."""
    return _store


def set_store(store: ProjectStore) -> None:
    global _store
    _store = store


def is_connected() -> bool:
    """Check if MongoDB is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    """Get connection error message if connection failed."""
    return _connection_error
