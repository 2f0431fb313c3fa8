"""Shared fixtures: a bot config and fake Home Assistant / Talk endpoints."""

import json
from typing import Any, Optional

import httpx
import pytest

from talk_ha_bot.config import BotConfig, HomeAssistantConfig
from talk_ha_bot.signature import sign
from talk_ha_bot.transport.http import AutomationClient, OutboundNotifier

SECRET = "0123456789abcdef-talk-secret"
BACKEND = "https://cloud.example.com/"
HA_URL = "http://homeassistant.local:8123/"
WEBHOOK_ID = "talk_bot"
NONCE = "A" * 64
ROOM = "n3xtc10ud"
MESSAGE_ID = "1567"


class FakeEndpoint:
    """httpx MockTransport handler that records requests."""

    def __init__(self, status: int = 200, text: str = "", exc: Optional[Exception] = None):
        self.status = status
        self.text = text
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status, text=self.text)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def chat_envelope(text: str, object_name: str = "message", content: Optional[str] = None) -> bytes:
    if content is None:
        content = json.dumps({"message": text, "parameters": []})
    return json.dumps({
        "type": "Create",
        "actor": {"type": "Person", "id": "users/alice", "name": "Alice"},
        "object": {
            "type": "Note",
            "id": MESSAGE_ID,
            "name": object_name,
            "content": content,
            "mediaType": "text/markdown",
        },
        "target": {"type": "Collection", "id": ROOM, "name": "Home"},
    }).encode("utf-8")


def talk_headers(body: bytes, secret: str = SECRET, nonce: str = NONCE) -> dict[str, str]:
    return {
        "X-Nextcloud-Talk-Backend": BACKEND,
        "X-Nextcloud-Talk-Random": nonce,
        "X-Nextcloud-Talk-Signature": sign(body, nonce, secret),
    }


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(secret=SECRET, ha=HomeAssistantConfig(url=HA_URL, webhook_id=WEBHOOK_ID))


@pytest.fixture
def hass() -> FakeEndpoint:
    return FakeEndpoint(status=200)


@pytest.fixture
def talk() -> FakeEndpoint:
    return FakeEndpoint(status=201)


@pytest.fixture
def automation(config: BotConfig, hass: FakeEndpoint) -> AutomationClient:
    return AutomationClient.from_config(config, client=hass.client())


@pytest.fixture
def notifier(config: BotConfig, talk: FakeEndpoint) -> OutboundNotifier:
    return OutboundNotifier.from_config(config, client=talk.client())
