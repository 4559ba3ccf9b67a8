# newsletter/routes/dependencies.py
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError

from newsletter.config import Settings
from newsletter.database import SubscriptionStore
from newsletter.services import (
    ConfirmationService,
    EmailClient,
    NewsletterService,
    SubscriptionService,
)

SUBSCRIPTION_FORM_FIELDS = ("name", "email")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SubscriptionStore:
    return request.app.state.store


def get_email_client(request: Request) -> EmailClient:
    return request.app.state.email_client


def get_subscription_service(
    store: SubscriptionStore = Depends(get_store),
    email_client: EmailClient = Depends(get_email_client),
    settings: Settings = Depends(get_settings)
) -> SubscriptionService:
    return SubscriptionService(store, email_client, settings.application.base_url)


def get_confirmation_service(
    store: SubscriptionStore = Depends(get_store)
) -> ConfirmationService:
    return ConfirmationService(store)


def get_newsletter_service(
    store: SubscriptionStore = Depends(get_store),
    email_client: EmailClient = Depends(get_email_client)
) -> NewsletterService:
    return NewsletterService(store, email_client)


@dataclass
class SubscriptionForm:
    name: str
    email: str


async def subscription_form(request: Request) -> SubscriptionForm:
    """Read the raw form fields.

    A field that is absent is a malformed request (422). A field that is
    present but blank is left for the domain validators to reject (400).
    """
    form = await request.form()
    missing = [field for field in SUBSCRIPTION_FORM_FIELDS if field not in form]
    if missing:
        raise RequestValidationError([
            {"type": "missing", "loc": ("body", field), "msg": "Field required", "input": None}
            for field in missing
        ])
    return SubscriptionForm(name=str(form["name"]), email=str(form["email"]))
