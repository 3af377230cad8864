from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from reviewsync.adapters.slack import NotificationError, SlackNotifier
from tests.helpers.http import make_client_factory

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


def test_send_posts_payload_to_webhook() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="ok")

    notifier = SlackNotifier(WEBHOOK, client_factory=make_client_factory(handler))

    asyncio.run(notifier.send({"text": "hello"}))

    (request,) = requests
    assert request.method == "POST"
    assert str(request.url) == WEBHOOK
    assert json.loads(request.content) == {"text": "hello"}


def test_send_raises_on_rejected_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="invalid_blocks")

    notifier = SlackNotifier(WEBHOOK, client_factory=make_client_factory(handler))

    with pytest.raises(NotificationError, match="invalid_blocks"):
        asyncio.run(notifier.send({"blocks": []}))
