# newsletter/domain/new_subscriber.py
from dataclasses import dataclass

from .subscriber_email import SubscriberEmail
from .subscriber_name import SubscriberName


@dataclass(frozen=True)
class NewSubscriber:
    name: SubscriberName
    email: SubscriberEmail

    @classmethod
    def parse(cls, name: str, email: str) -> "NewSubscriber":
        # Name first, so a request with two bad fields reports the name
        parsed_name = SubscriberName.parse(name)
        parsed_email = SubscriberEmail.parse(email)
        return cls(name=parsed_name, email=parsed_email)
