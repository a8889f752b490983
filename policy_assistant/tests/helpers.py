"""Shared builders for stream bodies, fake endpoints and fake editors."""
from __future__ import annotations

import json
from typing import Callable, Iterable, Iterator, List, Optional

import httpx

from policy_assistant.assistant import CompletionTransport
from policy_assistant.base.models import Diagnostic
from policy_assistant.config.defaults import DEFAULT_API_URL


def sse_line(content: str) -> str:
    """One ``data:`` line carrying ``content`` as a delta."""
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}, ensure_ascii=False) + "\n"


def sse_body(*contents: str, done: bool = True) -> str:
    body = "".join(sse_line(c) for c in contents)
    if done:
        body += "data: [DONE]\n"
    return body


def completion_json(content: Optional[str]) -> dict:
    if content is None:
        return {"choices": []}
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def make_transport(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    api_url: str = DEFAULT_API_URL,
    api_key: Optional[str] = "sk-test",
) -> CompletionTransport:
    """Transport whose HTTP traffic is served by ``handler``."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return CompletionTransport(api_url, api_key, client=client)


def streaming_handler(
    chunks: Iterable[bytes],
    *,
    status: int = 200,
    seen: Optional[List[httpx.Request]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every request with ``chunks`` as a streamed body."""
    parts = list(chunks)

    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=iter(parts), headers={"content-type": "text/event-stream"})

    return _handler


def failing_stream(chunks: Iterable[bytes], exc: Exception) -> Iterator[bytes]:
    """Yield ``chunks`` then raise ``exc`` as if the connection dropped."""
    yield from chunks
    raise exc


class FakeEditor:
    """In-memory editor surface recording published markers."""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.markers: List[Diagnostic] = []
        self.marker_calls = 0
        self._listeners: List[Callable[[], None]] = []

    def get_value(self) -> str:
        return self.value

    def set_markers(self, diagnostics: List[Diagnostic]) -> None:
        self.markers = list(diagnostics)
        self.marker_calls += 1

    def on_did_change_content(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def type_text(self, value: str) -> None:
        self.value = value
        for listener in list(self._listeners):
            listener()
