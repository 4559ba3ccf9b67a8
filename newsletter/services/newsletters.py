# newsletter/services/newsletters.py
import logging
from dataclasses import dataclass

from newsletter.database import SubscriptionStore
from newsletter.errors import TransportError, ValidationError, error_chain
from newsletter.services.email_client import EmailClient

logger = logging.getLogger(__name__)


@dataclass
class NewsletterIssue:
    title: str
    html: str
    text: str


@dataclass
class DispatchReport:
    delivered: int = 0
    skipped: int = 0
    failed: int = 0


class NewsletterService:
    def __init__(self, store: SubscriptionStore, email_client: EmailClient):
        self.store = store
        self.email_client = email_client

    async def publish(self, issue: NewsletterIssue) -> DispatchReport:
        """Send an issue to every confirmed subscriber, one at a time.

        A bad stored address or a failed delivery is logged and counted;
        it never stops the remaining recipients from getting the issue.
        """
        report = DispatchReport()

        async for subscriber in self.store.list_confirmed_subscriber_emails():
            if isinstance(subscriber, ValidationError):
                report.skipped += 1
                logger.warning(
                    "Skipping a confirmed subscriber. Their stored contact details are invalid\n"
                    f"{error_chain(subscriber)}"
                )
                continue

            try:
                await self.email_client.send_email(subscriber, issue.title, issue.html, issue.text)
            except TransportError as e:
                report.failed += 1
                logger.error(
                    f"Failed to send newsletter issue to {subscriber}\n{error_chain(e)}"
                )
                continue

            report.delivered += 1

        logger.info(
            f"Newsletter '{issue.title}' dispatched: {report.delivered} delivered, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report
