import json

import httpx
import pytest

from reminder_app.utils import push


@pytest.fixture()
def captured(monkeypatch):
    requests = []
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    def fake_client(*args, **kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(push.httpx, "AsyncClient", fake_client)
    return requests


@pytest.mark.asyncio
async def test_without_push_url_only_logs(captured):
    assert await push.deliver_notification("Buy milk", "Personal - Reminder", "r1") is False
    assert captured == []


@pytest.mark.asyncio
async def test_posts_payload_with_handler_flags(captured):
    sent = await push.deliver_notification(
        "Buy milk",
        "Personal - Reminder",
        "r1",
        push_url="https://push.example/notify",
        token="secret",
    )
    assert sent is True

    [request] = captured
    assert request.headers["Authorization"] == "Bearer secret"
    payload = json.loads(request.content)
    assert payload["title"] == "Buy milk"
    assert payload["body"] == "Personal - Reminder"
    assert payload["data"] == {"reminder_id": "r1"}
    assert payload["show_alert"] is True
    assert payload["play_sound"] is True
    assert payload["set_badge"] is False
    assert payload["fired_at"].endswith("Z")


@pytest.mark.asyncio
async def test_http_error_is_raised(monkeypatch):
    real_client = httpx.AsyncClient

    def fake_client(*args, **kwargs):
        return real_client(transport=httpx.MockTransport(lambda r: httpx.Response(500)), **kwargs)

    monkeypatch.setattr(push.httpx, "AsyncClient", fake_client)
    with pytest.raises(httpx.HTTPStatusError):
        await push.deliver_notification("Buy milk", "Personal - Reminder", push_url="https://push.example/notify")
