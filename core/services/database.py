"""
Supabase Database Service

Usage:
    from core.services.database import get_database

    # At FastAPI startup (lifespan):
    await init_database()

    # Anywhere afterwards:
    db = get_database()
    product = await db.catalog.get_product("p1")
"""

from typing import Optional

from supabase._async.client import AsyncClient

from core.db import get_supabase
from core.logging import get_logger
from core.services.repositories import CatalogRepository

logger = get_logger(__name__)


class Database:
    """
    Supabase database facade.

    Must be built via the async factory `create()` or `init_database()`.
    """

    def __init__(self, client: AsyncClient):
        self.client = client
        self.catalog = CatalogRepository(self.client)

    @classmethod
    async def create(cls) -> "Database":
        """Create the async Supabase client and wrap it."""
        client = await get_supabase()
        return cls(client)


_database: Optional[Database] = None


async def init_database() -> Database:
    """Initialize the Database singleton. Call once at startup."""
    global _database
    if _database is None:
        _database = await Database.create()
        logger.info("Database initialized")
    return _database


def get_database() -> Database:
    """
    Get the Database singleton.

    Raises:
        RuntimeError: if init_database() has not been awaited yet
    """
    if _database is None:
        raise RuntimeError("Database not initialized. Call await init_database() at startup.")
    return _database
