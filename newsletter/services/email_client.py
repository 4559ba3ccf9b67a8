# newsletter/services/email_client.py - Postmark-style HTTP email transport
import httpx
import logging
from pydantic import SecretStr
from typing import Optional

from newsletter.config import EmailClientSettings
from newsletter.domain import SubscriberEmail
from newsletter.errors import TransportError

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "X-Postmark-Server-Token"


class EmailClient:
    """Sends one email per call. Retrying is left to the caller."""

    def __init__(
        self,
        base_url: str,
        sender: SubscriberEmail,
        authorization_token: SecretStr,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.sender = sender
        self.authorization_token = authorization_token
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport
        )

    @classmethod
    def from_settings(
        cls,
        conf: EmailClientSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "EmailClient":
        return cls(
            base_url=conf.base_url,
            sender=conf.sender(),
            authorization_token=conf.authorization_token,
            timeout=conf.timeout,
            transport=transport
        )

    async def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str
    ) -> None:
        payload = {
            "From": self.sender.value,
            "To": recipient.value,
            "Subject": subject,
            "HtmlBody": html_content,
            "TextBody": text_content,
        }
        headers = {AUTHORIZATION_HEADER: self.authorization_token.get_secret_value()}

        try:
            response = await self.http_client.post("/email", json=payload, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out sending email to {recipient}") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Email service rejected the email to {recipient} "
                f"with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Could not reach the email service for {recipient}") from e

        logger.debug(f"Email '{subject}' delivered to {recipient}")

    async def aclose(self):
        await self.http_client.aclose()
