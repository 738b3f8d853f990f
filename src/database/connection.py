"""
Database connection and pool management
"""

import json
import asyncpg
import logging
from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

# Global database pool
db_pool = None


async def _init_connection(conn):
    """Decode JSONB columns to Python objects on every pooled connection"""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog"
    )


async def init_database(dsn: str = None):
    """Initialize database connection pool and make sure collections exist"""
    global db_pool
    db_pool = await asyncpg.create_pool(
        dsn or DATABASE_URL,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=DB_COMMAND_TIMEOUT,
        statement_cache_size=0,  # Fix for pgbouncer compatibility
        init=_init_connection
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    # Imported here to avoid a cycle: the store looks the pool up through this module
    from database.document_store import ensure_collections
    await ensure_collections(db_pool)

    logger.info("Database initialized successfully")
    return db_pool


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")


def get_db_pool():
    """Get the database pool instance"""
    return db_pool
