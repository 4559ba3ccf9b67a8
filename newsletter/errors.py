# newsletter/errors.py
import logging
from typing import Protocol

INTERNAL_ERROR_MESSAGE = "An internal server error has occurred"


class ApiError(Protocol):
    """What every error needs to be turned into an HTTP response"""

    status_code: int
    log_level: int

    @property
    def public_message(self) -> str: ...


class ValidationError(ValueError):
    """Untrusted subscriber input was rejected"""

    status_code = 400
    log_level = logging.WARNING

    @property
    def public_message(self) -> str:
        return f"invalid value: {self}"


class UnknownToken(Exception):
    status_code = 401
    log_level = logging.WARNING

    def __init__(self):
        super().__init__("There is no subscriber associated with the provided token.")

    @property
    def public_message(self) -> str:
        return str(self)


class InternalError(Exception):
    """Failures whose details must never reach the client"""

    status_code = 500
    log_level = logging.ERROR

    @property
    def public_message(self) -> str:
        return INTERNAL_ERROR_MESSAGE


class StoreError(InternalError):
    pass


class StoreConflict(StoreError):
    pass


class StoreUnavailable(StoreError):
    pass


class TransportError(InternalError):
    pass


def error_chain(exc: BaseException) -> str:
    """Render an exception followed by its causes, one per line"""
    lines = [f"{type(exc).__name__}: {exc}"]
    current = exc.__cause__ or exc.__context__
    while current is not None:
        lines.append(f"Caused by: {type(current).__name__}: {current}")
        current = current.__cause__ or current.__context__
    return "\n".join(lines)
