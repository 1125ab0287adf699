"""Tests for the agent server client."""

import asyncio
import json

import httpx
import pytest

from focus_notify.client import AgentServerClient

SERVER = "http://agent.test"


def _client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AgentServerClient(SERVER, http_client=http)


async def _collect(aiter):
    return [item async for item in aiter]


class TestSessions:
    def test_get_session_scoped(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": "s1", "title": "Build"})

        client = _client(handler)
        data = asyncio.run(client.get_session("s1", directory="/work"))
        assert data == {"id": "s1", "title": "Build"}
        assert seen[0].url.path == "/session/s1"
        assert seen[0].url.params["directory"] == "/work"

    def test_get_session_unscoped(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": "s1"})

        asyncio.run(_client(handler).get_session("s1"))
        assert "directory" not in seen[0].url.params

    def test_get_session_not_found_raises(self):
        client = _client(lambda request: httpx.Response(404, json={"error": "not found"}))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(client.get_session("missing"))

    def test_list_sessions(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"id": "s1"}, {"id": "s2"}])

        data = asyncio.run(_client(handler).list_sessions(directory="/work", limit=100))
        assert [s["id"] for s in data] == ["s1", "s2"]
        assert seen[0].url.params["limit"] == "100"
        assert seen[0].url.params["directory"] == "/work"


class TestToast:
    def test_show_toast(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=True)

        asyncio.run(_client(handler).show_toast("Title", "Body", variant="warning", directory="/work"))
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/tui/show-toast"
        assert json.loads(request.content) == {"title": "Title", "message": "Body", "variant": "warning"}

    def test_show_toast_error_raises(self):
        client = _client(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(client.show_toast("Title", "Body"))


class TestEventStream:
    def test_parses_data_lines(self):
        body = (
            'data: {"type": "server.connected", "properties": {}}\n\n'
            ": keepalive\n\n"
            'data: {"type": "session.idle", "properties": {"sessionID": "s1"}}\n\n'
            "data: not json\n\n"
            "data:\n\n"
        )
        client = _client(lambda request: httpx.Response(200, text=body))
        events = asyncio.run(_collect(client.stream_events()))
        assert [e["type"] for e in events] == ["server.connected", "session.idle"]


class TestCheckServer:
    def test_healthy(self):
        client = _client(lambda request: httpx.Response(200, json=[]))
        assert asyncio.run(client.check_server()) == {"status": "healthy"}

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        status = asyncio.run(_client(handler).check_server())
        assert status["status"] == "unreachable"

    def test_error_status(self):
        client = _client(lambda request: httpx.Response(500))
        assert asyncio.run(client.check_server())["status"] == "error"
