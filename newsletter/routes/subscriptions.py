# newsletter/routes/subscriptions.py
from fastapi import APIRouter, Depends, Query, Response, status
import logging

from newsletter.routes.dependencies import (
    SubscriptionForm,
    get_confirmation_service,
    get_subscription_service,
    subscription_form,
)
from newsletter.services import ConfirmationService, SubscriptionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("")
async def subscribe(
    form: SubscriptionForm = Depends(subscription_form),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Register a subscriber and send them a confirmation link"""
    logger.info(f"Adding a new subscriber: {form.email} ({form.name})")
    await service.subscribe(form.name, form.email)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/confirm")
async def confirm(
    subscription_token: str = Query(...),
    service: ConfirmationService = Depends(get_confirmation_service)
):
    """Confirm a pending subscriber"""
    await service.confirm(subscription_token)
    return Response(status_code=status.HTTP_200_OK)
