import json

import httpx
import pytest

from mdp_survey.clients.mailer import MailerClient, MailerError


def _client(handler):
    return MailerClient(
        base_url="https://mail.example.com/v1",
        api_key="secret",
        sender="surveys@example.com",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_send_message_posts_to_relay():
    seen = []

    async def handler(request):
        seen.append(request)
        return httpx.Response(202, json={"id": "msg-1"})

    client = _client(handler)

    result = await client.send_message(to="pat@example.com", subject="Hi", text="Body")

    assert result == {"id": "msg-1"}
    request = seen[0]
    assert request.url.path == "/v1/messages"
    assert request.headers["Authorization"] == "Bearer secret"
    assert json.loads(request.content) == {
        "from": "surveys@example.com",
        "to": "pat@example.com",
        "subject": "Hi",
        "text": "Body",
    }

    await client.close()


@pytest.mark.asyncio
async def test_error_response_is_not_retried():
    calls = {"count": 0}

    async def handler(request):
        calls["count"] += 1
        return httpx.Response(503, text="unavailable")

    client = _client(handler)

    with pytest.raises(MailerError) as exc:
        await client.send_message(to="pat@example.com", subject="Hi", text="Body")

    assert exc.value.status_code == 503
    assert exc.value.body == "unavailable"
    assert calls["count"] == 1

    await client.close()


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped():
    async def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(MailerError) as exc:
        await client.send_message(to="pat@example.com", subject="Hi", text="Body")

    assert "connection refused" in str(exc.value)
    assert exc.value.status_code is None

    await client.close()
