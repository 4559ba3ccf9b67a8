# newsletter/models.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class SubscriptionStatus(str, Enum):
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"


@dataclass
class SubscriberRecord:
    id: UUID
    email: str
    name: str
    subscribed_at: datetime
    status: SubscriptionStatus
