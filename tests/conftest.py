"""
Shared fixtures: test settings, a scripted fake of the completion API and
the app wired to it.
"""
import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from main import create_app
from visionchat.api.endpoints.bot import get_bot_controller
from visionchat.config.settings import Settings, get_settings
from visionchat.controllers.bot_controller import BotController
from visionchat.services.completion import CompletionClient


def record(content: Optional[str] = None, role: Optional[str] = None) -> bytes:
    """One `data:` event record as the completion API sends it."""
    delta: Dict[str, Any] = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    chunk = {
        "id": "chatcmpl-test",
        "object": "chat.completion.chunk",
        "model": "gpt-3.5-turbo",
        "choices": [{"index": 0, "delta": delta, "finish_reason": None}],
    }
    return f"data: {json.dumps(chunk, ensure_ascii=False)}\n\n".encode("utf-8")


DONE = b"data: [DONE]\n\n"


class RecordingStream(httpx.AsyncByteStream):
    """Response body that delivers one chunk per read and records being closed."""

    def __init__(self, chunks: List[bytes], delay: float = 0.0):
        self.chunks = chunks
        self.delay = delay
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class FakeUpstream:
    """
    Stand-in for the completion API.

    Each request gets the same list of body chunks, delivered one network
    read at a time, optionally `delay` seconds apart. Request bodies,
    headers and response bodies are kept for assertions.
    """

    def __init__(
        self,
        chunks: Optional[List[bytes]] = None,
        status_code: int = 200,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.chunks = chunks or []
        self.status_code = status_code
        self.error = error
        self.delay = delay
        self.requests: List[Dict[str, Any]] = []
        self.headers: List[httpx.Headers] = []
        self.streams: List[RecordingStream] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)

        if self.error is not None:
            raise self.error

        if self.status_code != 200:
            return httpx.Response(
                self.status_code,
                json={"error": {"message": "upstream failure", "type": "server_error"}},
            )

        stream = RecordingStream(self.chunks, delay=self.delay)
        self.streams.append(stream)
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream; charset=utf-8"},
            stream=stream,
        )

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        openai_model="gpt-3.5-turbo",
        contact_email="team@example.com",
        opening_interval_ms=0,
        live_interval_ms=0,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream(
        [record(role="assistant"), record("Hello"), record(" there"), DONE]
    )


@pytest.fixture
def app(settings, upstream):
    app = create_app()

    def controller_override() -> BotController:
        completion = CompletionClient(settings, http_client=upstream.http_client())
        return BotController(settings, completion=completion)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_bot_controller] = controller_override
    yield app
    app.dependency_overrides.clear()
