import json
import re
from dataclasses import dataclass
from typing import List, Set
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from newsletter.config import ApplicationSettings, DatabaseSettings, Settings
from newsletter.database import InMemorySubscriptionStore
from newsletter.domain import SubscriberEmail
from newsletter.main import create_app
from newsletter.routes.dependencies import get_email_client, get_settings, get_store
from newsletter.services import EmailClient

BASE_URL = "http://localhost:8000"
EMAIL_SERVER_URL = "http://email.test"


class FakeEmailServer:
    """Stands in for the Postmark API and records every request it gets"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.failing_recipients: Set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if body["To"] in self.failing_recipients:
            return httpx.Response(500)
        return httpx.Response(self.status_code)

    def bodies(self) -> List[dict]:
        return [json.loads(request.content) for request in self.requests]


@dataclass
class ConfirmationLinks:
    html: str
    text: str


def extract_link(body: str) -> str:
    links = re.findall(r"https?://[^\s\"<>]+", body)
    assert len(links) == 1
    return links[0]


def get_confirmation_links(email_body: dict) -> ConfirmationLinks:
    return ConfirmationLinks(
        html=extract_link(email_body["HtmlBody"]),
        text=extract_link(email_body["TextBody"]),
    )


def token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["subscription_token"][0]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        application=ApplicationSettings(base_url=BASE_URL),
        database=DatabaseSettings(backend="memory"),
    )


@pytest.fixture
def store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest.fixture
def email_server() -> FakeEmailServer:
    return FakeEmailServer()


@pytest.fixture
def email_client(email_server) -> EmailClient:
    return EmailClient(
        base_url=EMAIL_SERVER_URL,
        sender=SubscriberEmail.parse("newsletter@example.com"),
        authorization_token=SecretStr("server-token"),
        timeout=0.2,
        transport=httpx.MockTransport(email_server.handler),
    )


@pytest.fixture
def app(settings, store, email_client):
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_email_client] = lambda: email_client
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def subscribe(client: TestClient, body: str) -> httpx.Response:
    return client.post(
        "/subscriptions",
        content=body,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def create_unconfirmed_subscriber(
    client: TestClient,
    email_server: FakeEmailServer,
    body: str = "name=na%20me&email=na_me%40example.com"
) -> ConfirmationLinks:
    response = subscribe(client, body)
    assert response.status_code == 200
    return get_confirmation_links(email_server.bodies()[-1])


def create_confirmed_subscriber(
    client: TestClient,
    email_server: FakeEmailServer,
    body: str = "name=na%20me&email=na_me%40example.com"
) -> ConfirmationLinks:
    links = create_unconfirmed_subscriber(client, email_server, body)
    response = client.get(
        "/subscriptions/confirm",
        params={"subscription_token": token_from_link(links.html)},
    )
    assert response.status_code == 200
    return links
