# newsletter/database/subscription_store.py
import asyncio
import asyncpg
import logging
import uuid
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from newsletter.database.store import ConfirmedSubscriber
from newsletter.domain import NewSubscriber, SubscriberEmail
from newsletter.errors import StoreConflict, StoreError, StoreUnavailable, ValidationError
from newsletter.models import SubscriptionStatus

logger = logging.getLogger(__name__)

_CONNECTIVITY_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.InterfaceError,
    asyncpg.CannotConnectNowError,
    asyncpg.ConnectionDoesNotExistError,
)


@contextmanager
def store_errors(action: str):
    """Translate asyncpg failures into the store's error types"""
    try:
        yield
    except asyncpg.IntegrityConstraintViolationError as e:
        raise StoreConflict(f"Failed to {action}: constraint violated") from e
    except _CONNECTIVITY_ERRORS as e:
        raise StoreUnavailable(f"Failed to {action}: database unavailable") from e
    except asyncpg.PostgresError as e:
        raise StoreError(f"Failed to {action}") from e


class PostgresSubscriptionTransaction:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection
        self._transaction = connection.transaction()
        self.finished = False

    async def start(self):
        with store_errors("begin transaction"):
            await self._transaction.start()

    async def insert_subscriber(self, new_subscriber: NewSubscriber) -> UUID:
        subscriber_id = uuid.uuid4()
        query = """
            INSERT INTO subscriptions (id, email, name, subscribed_at, status)
            VALUES ($1, $2, $3, now(), $4)
        """
        with store_errors("insert subscriber"):
            await self.conn.execute(
                query,
                subscriber_id,
                new_subscriber.email.value,
                new_subscriber.name.value,
                SubscriptionStatus.PENDING_CONFIRMATION.value,
            )
        return subscriber_id

    async def insert_token(self, subscriber_id: UUID, subscription_token: str) -> None:
        query = """
            INSERT INTO subscription_tokens (subscription_token, subscriber_id)
            VALUES ($1, $2)
        """
        with store_errors("store subscription token"):
            await self.conn.execute(query, subscription_token, subscriber_id)

    async def commit(self) -> None:
        try:
            with store_errors("commit transaction"):
                await self._transaction.commit()
        finally:
            # A failed COMMIT leaves the transaction unusable, even for ROLLBACK
            self.finished = True

    async def rollback(self) -> None:
        if self.finished:
            return
        self.finished = True
        with store_errors("roll back transaction"):
            await self._transaction.rollback()


class PostgresSubscriptionStore:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[PostgresSubscriptionTransaction]:
        with store_errors("acquire a connection"):
            connection = await self.pool.acquire()
        try:
            transaction = PostgresSubscriptionTransaction(connection)
            await transaction.start()
            try:
                yield transaction
            finally:
                if not transaction.finished:
                    await transaction.rollback()
        finally:
            await self.pool.release(connection)

    async def find_subscriber_id_by_token(self, subscription_token: str) -> Optional[UUID]:
        query = """
            SELECT subscriber_id FROM subscription_tokens
            WHERE subscription_token = $1
        """
        with store_errors("look up subscription token"):
            async with self.pool.acquire() as connection:
                return await connection.fetchval(query, subscription_token)

    async def mark_confirmed(self, subscriber_id: UUID) -> None:
        query = "UPDATE subscriptions SET status = $1 WHERE id = $2"
        with store_errors("confirm subscriber"):
            async with self.pool.acquire() as connection:
                await connection.execute(query, SubscriptionStatus.CONFIRMED.value, subscriber_id)

    async def list_confirmed_subscriber_emails(self) -> AsyncIterator[ConfirmedSubscriber]:
        query = "SELECT email FROM subscriptions WHERE status = $1"
        with store_errors("read confirmed subscribers"):
            async with self.pool.acquire() as connection:
                # Server side cursors only live inside a transaction
                async with connection.transaction():
                    async for record in connection.cursor(query, SubscriptionStatus.CONFIRMED.value):
                        try:
                            yield SubscriberEmail.parse(record["email"])
                        except ValidationError as e:
                            yield e
