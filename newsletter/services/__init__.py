# newsletter/services/__init__.py
from .confirmation import ConfirmationService
from .email_client import EmailClient
from .newsletters import DispatchReport, NewsletterIssue, NewsletterService
from .subscriptions import SubscriptionService, confirmation_link

__all__ = [
    "ConfirmationService",
    "DispatchReport",
    "EmailClient",
    "NewsletterIssue",
    "NewsletterService",
    "SubscriptionService",
    "confirmation_link",
]
