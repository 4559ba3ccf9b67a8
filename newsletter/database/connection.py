# newsletter/database/connection.py
import asyncpg
from typing import Optional
import logging

from newsletter.config import DatabaseSettings

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id UUID PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        subscribed_at TIMESTAMPTZ NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending_confirmation'
    );

    CREATE TABLE IF NOT EXISTS subscription_tokens (
        subscription_token TEXT PRIMARY KEY,
        subscriber_id UUID NOT NULL REFERENCES subscriptions (id)
    );

    CREATE INDEX IF NOT EXISTS idx_subscriptions_status ON subscriptions (status);
"""


class DatabaseConnection:
    _pool: Optional[asyncpg.Pool] = None

    @classmethod
    async def get_pool(cls, conf: DatabaseSettings) -> asyncpg.Pool:
        """Get or create database connection pool"""
        if cls._pool is None:
            try:
                cls._pool = await asyncpg.create_pool(
                    conf.connection_string(),
                    min_size=conf.min_pool_size,
                    max_size=conf.max_pool_size,
                    command_timeout=conf.command_timeout,
                    ssl=conf.ssl_mode,
                )
                logger.info(f"Database connection pool created for {conf.host}:{conf.port}")
            except Exception as e:
                logger.error(f"Failed to create database pool: {e}")
                raise
        return cls._pool

    @classmethod
    async def close_pool(cls):
        """Close database connection pool"""
        if cls._pool:
            await cls._pool.close()
            cls._pool = None
            logger.info("Database connection pool closed")


async def migrate(pool: asyncpg.Pool):
    """Create the subscription tables if they are missing"""
    async with pool.acquire() as connection:
        await connection.execute(SCHEMA_SQL)
    logger.info("Database schema is up to date")
