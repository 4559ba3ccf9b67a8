import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from newsletter.database import InMemorySubscriptionStore
from newsletter.domain import NewSubscriber, SubscriberEmail
from newsletter.errors import StoreConflict, ValidationError
from newsletter.models import SubscriberRecord, SubscriptionStatus


def new_subscriber(email="ursula@example.com") -> NewSubscriber:
    return NewSubscriber.parse("Ursula", email)


async def insert(store, subscriber, token="token"):
    async with store.begin() as transaction:
        subscriber_id = await transaction.insert_subscriber(subscriber)
        await transaction.insert_token(subscriber_id, token)
        await transaction.commit()
    return subscriber_id


async def collect(iterator):
    return [item async for item in iterator]


def test_committed_transaction_is_visible():
    store = InMemorySubscriptionStore()
    subscriber_id = asyncio.run(insert(store, new_subscriber()))

    [record] = store.list_subscribers()
    assert record.id == subscriber_id
    assert record.status == SubscriptionStatus.PENDING_CONFIRMATION
    assert store.tokens_for(subscriber_id) == ["token"]


def test_transaction_left_without_commit_is_rolled_back():
    store = InMemorySubscriptionStore()

    async def abandon():
        async with store.begin() as transaction:
            subscriber_id = await transaction.insert_subscriber(new_subscriber())
            await transaction.insert_token(subscriber_id, "token")

    asyncio.run(abandon())

    assert store.list_subscribers() == []
    assert store.tokens == {}


def test_failure_inside_a_transaction_leaves_nothing_behind():
    store = InMemorySubscriptionStore()

    async def fail():
        async with store.begin() as transaction:
            await transaction.insert_subscriber(new_subscriber())
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(fail())

    assert store.list_subscribers() == []


def test_duplicate_email_is_a_conflict():
    store = InMemorySubscriptionStore()
    asyncio.run(insert(store, new_subscriber(), token="first"))

    with pytest.raises(StoreConflict):
        asyncio.run(insert(store, new_subscriber(), token="second"))

    assert len(store.list_subscribers()) == 1
    assert "second" not in store.tokens


def test_unknown_token_resolves_to_none():
    store = InMemorySubscriptionStore()
    assert asyncio.run(store.find_subscriber_id_by_token("missing")) is None


def test_mark_confirmed_is_idempotent():
    store = InMemorySubscriptionStore()
    subscriber_id = asyncio.run(insert(store, new_subscriber()))

    asyncio.run(store.mark_confirmed(subscriber_id))
    asyncio.run(store.mark_confirmed(subscriber_id))

    [record] = store.list_subscribers()
    assert record.status == SubscriptionStatus.CONFIRMED


def test_confirmed_listing_reports_bad_rows_individually():
    store = InMemorySubscriptionStore()
    good_id = asyncio.run(insert(store, new_subscriber("good@example.com"), token="a"))
    asyncio.run(insert(store, new_subscriber("pending@example.com"), token="b"))
    asyncio.run(store.mark_confirmed(good_id))
    bad = SubscriberRecord(
        id=uuid.uuid4(),
        email="not-an-email",
        name="Broken",
        subscribed_at=datetime.now(timezone.utc),
        status=SubscriptionStatus.CONFIRMED,
    )
    store.subscribers[bad.id] = bad

    items = asyncio.run(collect(store.list_confirmed_subscriber_emails()))

    assert SubscriberEmail.parse("good@example.com") in items
    assert sum(isinstance(item, ValidationError) for item in items) == 1
    assert len(items) == 2
