"""Test doubles for HTTP bodies served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Iterable

import httpx


class CountingStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Response body double that records chunk reads and close calls.

    Items that are exceptions are raised when reached instead of yielded.
    """

    def __init__(self, chunks: Iterable[bytes | Exception]) -> None:
        self._chunks = list(chunks)
        self.reads = 0
        self.closed = 0

    def __iter__(self):
        for chunk in self._chunks:
            self.reads += 1
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    async def __aiter__(self):
        for chunk in self._chunks:
            self.reads += 1
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    def close(self) -> None:
        self.closed += 1

    async def aclose(self) -> None:
        self.closed += 1


def ndjson(*objects: dict[str, Any]) -> list[bytes]:
    return [(json.dumps(obj) + "\n").encode("utf-8") for obj in objects]


def generate_lines(*tokens: str) -> list[bytes]:
    """Streamed generate body: one line per token plus an empty terminal line."""
    objects = [{"response": token, "done": False} for token in tokens]
    objects.append({"response": "", "done": True, "eval_count": len(tokens)})
    return ndjson(*objects)


class StreamServer:
    """Serves a fresh `CountingStream` per request and keeps every request."""

    def __init__(
        self,
        status_code: int,
        chunks: Iterable[bytes | Exception],
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.chunks = list(chunks)
        self.headers = headers or {}
        self.streams: list[CountingStream] = []
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        stream = CountingStream(self.chunks)
        self.streams.append(stream)
        return httpx.Response(self.status_code, headers=self.headers, stream=stream)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def stream(self) -> CountingStream:
        return self.streams[-1]
