# newsletter/database/__init__.py
from .connection import DatabaseConnection, migrate
from .memory_store import InMemorySubscriptionStore
from .store import ConfirmedSubscriber, SubscriptionStore, SubscriptionTransaction
from .subscription_store import PostgresSubscriptionStore

__all__ = [
    "ConfirmedSubscriber",
    "DatabaseConnection",
    "InMemorySubscriptionStore",
    "PostgresSubscriptionStore",
    "SubscriptionStore",
    "SubscriptionTransaction",
    "migrate",
]
