# newsletter/database/store.py
from typing import AsyncContextManager, AsyncIterator, Optional, Protocol, Union
from uuid import UUID

from newsletter.domain import NewSubscriber, SubscriberEmail
from newsletter.errors import ValidationError

ConfirmedSubscriber = Union[SubscriberEmail, ValidationError]


class SubscriptionTransaction(Protocol):
    """A unit of work; nothing it writes is visible before ``commit``"""

    async def insert_subscriber(self, new_subscriber: NewSubscriber) -> UUID: ...

    async def insert_token(self, subscriber_id: UUID, subscription_token: str) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SubscriptionStore(Protocol):
    def begin(self) -> AsyncContextManager[SubscriptionTransaction]:
        """Open a transaction that is rolled back unless committed"""
        ...

    async def find_subscriber_id_by_token(self, subscription_token: str) -> Optional[UUID]: ...

    async def mark_confirmed(self, subscriber_id: UUID) -> None: ...

    def list_confirmed_subscriber_emails(self) -> AsyncIterator[ConfirmedSubscriber]:
        """Stream confirmed subscribers; rows with a bad stored email come
        through as a ``ValidationError`` instead of ending the stream"""
        ...
