# newsletter/domain/subscriber_email.py
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from newsletter.errors import ValidationError


@dataclass(frozen=True)
class SubscriberEmail:
    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberEmail":
        """Build an email address after a syntax-only check (no DNS lookups)"""
        if not raw:
            raise ValidationError("subscriber email is empty")

        try:
            validate_email(raw, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(f"{raw!r} is not a valid subscriber email") from e

        return cls(raw)

    def __str__(self) -> str:
        return self.value
