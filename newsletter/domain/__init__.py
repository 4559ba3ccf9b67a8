# newsletter/domain/__init__.py
from .new_subscriber import NewSubscriber
from .subscriber_email import SubscriberEmail
from .subscriber_name import SubscriberName
from .tokens import generate_subscription_token

__all__ = ["NewSubscriber", "SubscriberEmail", "SubscriberName", "generate_subscription_token"]
