# newsletter/services/subscriptions.py
import logging
from urllib.parse import urlencode
from uuid import UUID

from newsletter.database import SubscriptionStore
from newsletter.domain import NewSubscriber, generate_subscription_token
from newsletter.errors import TransportError
from newsletter.services.email_client import EmailClient

logger = logging.getLogger(__name__)

CONFIRMATION_PATH = "/subscriptions/confirm"
CONFIRMATION_SUBJECT = "Welcome!"


def confirmation_link(base_url: str, subscription_token: str) -> str:
    query = urlencode({"subscription_token": subscription_token})
    return f"{base_url.rstrip('/')}{CONFIRMATION_PATH}?{query}"


class SubscriptionService:
    def __init__(self, store: SubscriptionStore, email_client: EmailClient, base_url: str):
        self.store = store
        self.email_client = email_client
        self.base_url = base_url

    async def subscribe(self, name: str, email: str) -> UUID:
        """Register a pending subscriber and email them a confirmation link.

        Raises ``ValidationError`` before touching the store. Store failures
        roll the transaction back. A failed email leaves the committed
        subscriber pending and raises ``TransportError``.
        """
        new_subscriber = NewSubscriber.parse(name, email)
        subscription_token = generate_subscription_token()

        async with self.store.begin() as transaction:
            subscriber_id = await transaction.insert_subscriber(new_subscriber)
            await transaction.insert_token(subscriber_id, subscription_token)
            await transaction.commit()

        logger.info(f"New subscriber saved: {new_subscriber.email} ({subscriber_id})")

        try:
            await self.send_confirmation_email(new_subscriber, subscription_token)
        except TransportError as e:
            raise TransportError(
                f"Failed to send confirmation email to {new_subscriber.email}"
            ) from e

        return subscriber_id

    async def send_confirmation_email(self, new_subscriber: NewSubscriber, subscription_token: str):
        link = confirmation_link(self.base_url, subscription_token)
        html_content = (
            "Welcome to our newsletter! We're glad to have you.<br />"
            f'Click <a href="{link}">here</a> to confirm your subscription.'
        )
        text_content = (
            "Welcome to our newsletter! We're glad to have you.\n"
            f"Visit {link} to confirm your subscription."
        )
        await self.email_client.send_email(
            new_subscriber.email,
            CONFIRMATION_SUBJECT,
            html_content,
            text_content
        )
        logger.info(f"Confirmation email sent to {new_subscriber.email}")
