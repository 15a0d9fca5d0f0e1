"""Tests for the conversation-keeping chat client."""

import json

import httpx
import pytest

from app.clients.chat import FALLBACK_REPLY, ChatClient


def make_client(handler) -> ChatClient:
    return ChatClient("http://testserver", http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class RecordingEndpoint:
    """Chat endpoint stand-in that replies with a numbered answer."""

    def __init__(self):
        self.payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        return httpx.Response(200, json={"message": f"Answer {len(self.payloads)}"})


class TestChatClient:
    """Tests for sending messages and keeping the conversation."""

    def test_successful_send_appends_two_messages(self):
        client = make_client(RecordingEndpoint())

        reply = client.send("Is it windy?")

        assert len(client.messages) == 2
        assert [(m.role, m.content) for m in client.messages] == [
            ("user", "Is it windy?"),
            ("assistant", "Answer 1"),
        ]
        assert reply == client.messages[-1]

    def test_whole_conversation_is_posted(self):
        endpoint = RecordingEndpoint()
        client = make_client(endpoint)

        client.send("Is it windy?")
        client.send("And tomorrow?")

        assert len(client.messages) == 4
        assert endpoint.payloads[1]["messages"] == [
            {"role": "user", "content": "Is it windy?"},
            {"role": "assistant", "content": "Answer 1"},
            {"role": "user", "content": "And tomorrow?"},
        ]

    def test_posts_to_chat_endpoint(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message": "ok"})

        make_client(handler).send("Hi")

        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://testserver/api/chat"

    def test_connection_error_appends_fallback(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        reply = client.send("Is it windy?")

        assert len(client.messages) == 2
        assert reply.role == "assistant"
        assert reply.content == FALLBACK_REPLY

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, json={"error": "Rate limit exceeded"}),
            httpx.Response(400, json={"error": "Messages array is required"}),
            httpx.Response(200, text="<html>gateway</html>"),
            httpx.Response(200, json={"unexpected": True}),
        ],
    )
    def test_failed_response_appends_fallback(self, response):
        client = make_client(lambda request: response)

        client.send("Is it windy?")

        assert client.messages[-1].content == FALLBACK_REPLY

    def test_blank_input_is_ignored(self):
        endpoint = RecordingEndpoint()
        client = make_client(endpoint)

        assert client.send("   ") is None
        assert client.messages == []
        assert endpoint.payloads == []

    def test_clear(self):
        client = make_client(RecordingEndpoint())
        client.send("Hi")

        client.clear()

        assert client.messages == []
