# newsletter/services/confirmation.py
import logging
from uuid import UUID

from newsletter.database import SubscriptionStore
from newsletter.errors import StoreError, UnknownToken

logger = logging.getLogger(__name__)


class ConfirmationService:
    def __init__(self, store: SubscriptionStore):
        self.store = store

    async def confirm(self, subscription_token: str) -> UUID:
        """Mark the token's subscriber as confirmed. Safe to repeat."""
        try:
            subscriber_id = await self.store.find_subscriber_id_by_token(subscription_token)
        except StoreError as e:
            raise StoreError(
                "Failed to retrieve the subscriber id associated with the provided token."
            ) from e

        if subscriber_id is None:
            raise UnknownToken()

        try:
            await self.store.mark_confirmed(subscriber_id)
        except StoreError as e:
            raise StoreError("Failed to update the subscriber status to `confirmed`.") from e

        logger.info(f"Subscriber {subscriber_id} confirmed")
        return subscriber_id
