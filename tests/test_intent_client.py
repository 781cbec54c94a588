try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from finflow.clients import HttpIntentClient, IntentClassificationError, LocalIntentClient
from finflow.core.config import IntentServiceSettings
from finflow.schemas import IntentCategory
from finflow.services import classify


def _settings() -> IntentServiceSettings:
    return IntentServiceSettings(
        INTENT_SERVICE_URL="http://intent.test", INTENT_SERVICE_TIMEOUT=2
    )


@pytest.mark.asyncio
async def test_http_client_parses_remote_intent():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        query = json.loads(request.content)["query"]
        return httpx.Response(200, json=classify(query).model_dump(mode="json", by_alias=True))

    client = HttpIntentClient(_settings(), transport=httpx.MockTransport(handler))

    intent = await client.parse("I have credit card debt")

    assert intent.category is IntentCategory.DEBT_FREEDOM
    assert len(requests) == 1
    assert requests[0].url == "http://intent.test/api/intent/parse"


@pytest.mark.asyncio
async def test_http_client_does_not_retry_server_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"detail": "Failed to parse intent"})

    client = HttpIntentClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(IntentClassificationError, match="Failed to parse intent"):
        await client.parse("I want to retire")
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_http_client_wraps_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpIntentClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(IntentClassificationError):
        await client.parse("I want to retire")


@pytest.mark.asyncio
async def test_http_client_rejects_invalid_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"category": "lottery"})

    client = HttpIntentClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(IntentClassificationError, match="invalid payload"):
        await client.parse("I want to retire")


def test_http_client_requires_url():
    with pytest.raises(ValueError):
        HttpIntentClient(IntentServiceSettings(INTENT_SERVICE_URL=None))


@pytest.mark.asyncio
async def test_local_client_classifies_in_process():
    intent = await LocalIntentClient().parse("How do I build an emergency fund")

    assert intent.category is IntentCategory.EMERGENCY_FUND
