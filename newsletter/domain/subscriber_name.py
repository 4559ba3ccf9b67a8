# newsletter/domain/subscriber_name.py
from dataclasses import dataclass

import regex

from newsletter.errors import ValidationError

MAX_NAME_LENGTH = 256
FORBIDDEN_CHARACTERS = frozenset('/()"<>\\{}')


def grapheme_length(value: str) -> int:
    """Count extended grapheme clusters (user-perceived characters)"""
    return len(regex.findall(r"\X", value))


@dataclass(frozen=True)
class SubscriberName:
    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberName":
        """Build a name, rejecting blank, overlong or unsafe input"""
        if not raw.strip():
            raise ValidationError(f"{raw!r} is not a valid subscriber name: it is empty")

        if grapheme_length(raw) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"subscriber name is too long: at most {MAX_NAME_LENGTH} characters are allowed"
            )

        if any(char in FORBIDDEN_CHARACTERS for char in raw):
            raise ValidationError(
                f"{raw!r} is not a valid subscriber name: it contains a forbidden character"
            )

        return cls(raw)

    def __str__(self) -> str:
        return self.value
