# newsletter/database/memory_store.py
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, List, Optional
from uuid import UUID

from newsletter.database.store import ConfirmedSubscriber
from newsletter.domain import NewSubscriber, SubscriberEmail
from newsletter.errors import StoreConflict, StoreError, ValidationError
from newsletter.models import SubscriberRecord, SubscriptionStatus

logger = logging.getLogger(__name__)


class InMemorySubscriptionTransaction:
    """Buffers writes and applies them to the store in one step on commit"""

    def __init__(self, store: "InMemorySubscriptionStore"):
        self.store = store
        self.subscribers: Dict[UUID, SubscriberRecord] = {}
        self.tokens: Dict[str, UUID] = {}
        self.finished = False

    def _ensure_open(self):
        if self.finished:
            raise StoreError("Transaction is already finished")

    async def insert_subscriber(self, new_subscriber: NewSubscriber) -> UUID:
        self._ensure_open()
        email = new_subscriber.email.value
        taken = [r.email for r in self.store.subscribers.values()]
        taken += [r.email for r in self.subscribers.values()]
        if email in taken:
            raise StoreConflict("Failed to insert subscriber: email already registered")

        record = SubscriberRecord(
            id=uuid.uuid4(),
            email=email,
            name=new_subscriber.name.value,
            subscribed_at=datetime.now(timezone.utc),
            status=SubscriptionStatus.PENDING_CONFIRMATION,
        )
        self.subscribers[record.id] = record
        return record.id

    async def insert_token(self, subscriber_id: UUID, subscription_token: str) -> None:
        self._ensure_open()
        if subscriber_id not in self.subscribers and subscriber_id not in self.store.subscribers:
            raise StoreConflict("Failed to store subscription token: unknown subscriber")
        if subscription_token in self.tokens or subscription_token in self.store.tokens:
            raise StoreConflict("Failed to store subscription token: token already exists")
        self.tokens[subscription_token] = subscriber_id

    async def commit(self) -> None:
        self._ensure_open()
        # No await between the updates, so other tasks never see half of them
        self.store.subscribers.update(self.subscribers)
        self.store.tokens.update(self.tokens)
        self.finished = True

    async def rollback(self) -> None:
        self.subscribers.clear()
        self.tokens.clear()
        self.finished = True


class InMemorySubscriptionStore:
    """Store backend for local development and tests"""

    def __init__(self):
        self.subscribers: Dict[UUID, SubscriberRecord] = {}
        self.tokens: Dict[str, UUID] = {}

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[InMemorySubscriptionTransaction]:
        transaction = InMemorySubscriptionTransaction(self)
        try:
            yield transaction
        finally:
            if not transaction.finished:
                await transaction.rollback()

    async def find_subscriber_id_by_token(self, subscription_token: str) -> Optional[UUID]:
        return self.tokens.get(subscription_token)

    async def mark_confirmed(self, subscriber_id: UUID) -> None:
        record = self.subscribers.get(subscriber_id)
        if record is not None:
            record.status = SubscriptionStatus.CONFIRMED

    async def list_confirmed_subscriber_emails(self) -> AsyncIterator[ConfirmedSubscriber]:
        confirmed = [
            r.email for r in self.subscribers.values()
            if r.status == SubscriptionStatus.CONFIRMED
        ]
        for email in confirmed:
            try:
                yield SubscriberEmail.parse(email)
            except ValidationError as e:
                yield e

    def list_subscribers(self) -> List[SubscriberRecord]:
        return list(self.subscribers.values())

    def tokens_for(self, subscriber_id: UUID) -> List[str]:
        return [token for token, owner in self.tokens.items() if owner == subscriber_id]
