# newsletter/routes/newsletters.py
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from newsletter.routes.dependencies import get_newsletter_service
from newsletter.services import NewsletterIssue, NewsletterService

router = APIRouter(tags=["newsletters"])


class NewsletterContent(BaseModel):
    text: str
    html: str


class PublishNewsletterRequest(BaseModel):
    title: str
    content: NewsletterContent


@router.post("/newsletters")
async def publish_newsletter(
    request: PublishNewsletterRequest,
    service: NewsletterService = Depends(get_newsletter_service)
):
    """Send an issue to every confirmed subscriber.

    Answers 200 once every subscriber has been tried, even if some
    deliveries failed; the failures are only logged.
    """
    issue = NewsletterIssue(
        title=request.title,
        html=request.content.html,
        text=request.content.text
    )
    await service.publish(issue)
    return Response(status_code=status.HTTP_200_OK)
