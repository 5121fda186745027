"""Order hand-off webhook tests."""
import httpx
import pytest

from snackdash.core import notifier as notifier_module
from snackdash.core.config import settings
from snackdash.core.notifier import OrderNotifier


@pytest.fixture
def webhook(monkeypatch):
    """Route the notifier's HTTP client to a scripted handler."""
    calls = []
    responses = []
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request):
        calls.append(request)
        outcome = responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(settings, "NOTIFY_WEBHOOK_URL", "http://hooks.test/orders")
    monkeypatch.setattr(settings, "NOTIFY_API_KEY", "hook-key")
    monkeypatch.setattr(
        notifier_module.httpx,
        "AsyncClient",
        lambda: real_client(transport=httpx.MockTransport(handler)),
    )
    return calls, responses


@pytest.mark.asyncio
async def test_skipped_without_webhook(monkeypatch):
    monkeypatch.setattr(settings, "NOTIFY_WEBHOOK_URL", None)
    assert await OrderNotifier.dispatch("t1", "o1", "5511999999999", "hi") is False


@pytest.mark.asyncio
async def test_dispatch_posts_summary(webhook):
    calls, responses = webhook
    responses.append(httpx.Response(200, json={"ok": True}))

    assert await OrderNotifier.dispatch("t1", "o1", "5511999999999", "*Total: 5.00*") is True

    assert len(calls) == 1
    request = calls[0]
    assert request.headers["Authorization"] == "Bearer hook-key"
    assert b'"order_id":"o1"' in request.content.replace(b" ", b"")


@pytest.mark.asyncio
async def test_timeout_is_retried_once(webhook):
    calls, responses = webhook
    responses.extend([httpx.ReadTimeout("slow"), httpx.Response(202)])

    assert await OrderNotifier.dispatch("t1", "o1", "5511999999999", "text") is True
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_gives_up_after_two_timeouts(webhook):
    calls, responses = webhook
    responses.extend([httpx.ReadTimeout("slow"), httpx.ReadTimeout("slower")])

    assert await OrderNotifier.dispatch("t1", "o1", "5511999999999", "text") is False
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_error_status_is_not_retried(webhook):
    calls, responses = webhook
    responses.append(httpx.Response(401, text="bad key"))

    assert await OrderNotifier.dispatch("t1", "o1", "5511999999999", "text") is False
    assert len(calls) == 1
