"""In-process stand-in for an Ollama server, for offline use and tests."""

from __future__ import annotations

import asyncio
import hashlib
import json
import time
from typing import Any, Iterable

import httpx

DEFAULT_MODELS = ("mock-llama", "mock-chat")


class MockOllama:
    """Answers `/api/tags`, `/api/generate`, `/api/chat` and `/api/embeddings` like the real server.

    Replies are deterministic for a given model and prompt. Streaming replies
    carry one word per line followed by an empty terminal line.
    """

    def __init__(
        self,
        *,
        models: Iterable[str] = DEFAULT_MODELS,
        latency_ms: int = 0,
        unauthorized: bool = False,
    ) -> None:
        self.models = list(models)
        self._latency_ms = latency_ms
        self._unauthorized = unauthorized
        self.requests: list[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._unauthorized:
            return httpx.Response(401, text="")
        path = request.url.path
        if path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": name} for name in self.models]})
        if path not in ("/api/generate", "/api/chat", "/api/embeddings"):
            return httpx.Response(404, text="404 page not found")

        try:
            body = json.loads(request.content or b"{}")
        except json.JSONDecodeError:
            return _error(400, "invalid JSON body")
        model = body.get("model")
        if not model:
            return _error(400, "model is required")
        if model not in self.models:
            return _error(404, f"model '{model}' not found")

        if path == "/api/embeddings":
            return httpx.Response(200, json={"embedding": mock_embedding(model, str(body.get("prompt", "")))})

        if path == "/api/chat":
            messages = body.get("messages") or []
            prompt = " ".join(str(message.get("content", "")) for message in messages)
        else:
            prompt = str(body.get("prompt", ""))
        text = mock_text(model, prompt)
        lines = _reply_lines(path, model, text, stream=body.get("stream", True))
        return httpx.Response(
            200,
            headers={"Content-Type": "application/x-ndjson"},
            stream=_LineStream(lines, self._latency_ms),
        )


def mock_text(model: str, prompt: str) -> str:
    digest = hashlib.sha256(f"{model}\n{prompt}".encode("utf-8")).digest()
    label = "YES" if digest[0] % 2 == 0 else "NO"
    return f"Decision: {label}. Mock response from {model}."


def mock_embedding(model: str, prompt: str, size: int = 8) -> list[float]:
    """Unit-range vector seeded from the same digest as `mock_text`."""
    digest = hashlib.sha256(f"{model}\n{prompt}".encode("utf-8")).digest()
    return [round(byte / 127.5 - 1.0, 6) for byte in digest[:size]]


def _error(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps({"error": message}).encode("utf-8"))


def _reply_lines(path: str, model: str, text: str, *, stream: bool) -> list[bytes]:
    chunks = _tokens(text) if stream else [text]
    lines = [_line(path, model, chunk, done=not stream) for chunk in chunks]
    if stream:
        lines.append(_line(path, model, "", done=True, eval_count=len(chunks)))
    return lines


def _tokens(text: str) -> list[str]:
    words = text.split(" ")
    return [word if index == 0 else f" {word}" for index, word in enumerate(words)]


def _line(path: str, model: str, text: str, *, done: bool, eval_count: int | None = None) -> bytes:
    payload: dict[str, Any] = {"model": model, "done": done}
    if path == "/api/chat":
        payload["message"] = {"role": "assistant", "content": text}
    else:
        payload["response"] = text
    if eval_count is not None:
        payload["eval_count"] = eval_count
    return (json.dumps(payload) + "\n").encode("utf-8")


class _LineStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    def __init__(self, lines: list[bytes], latency_ms: int) -> None:
        self._lines = lines
        self._delay_s = latency_ms / 1000.0

    def __iter__(self):
        for line in self._lines:
            if self._delay_s:
                time.sleep(self._delay_s)
            yield line

    async def __aiter__(self):
        for line in self._lines:
            if self._delay_s:
                await asyncio.sleep(self._delay_s)
            yield line
