"""Error types raised by ollamakit."""

from __future__ import annotations

from dataclasses import dataclass


class OllamaError(RuntimeError):
    """Base class for every failure surfaced by the client."""


class TransportError(OllamaError):
    """Connection, timeout or stream I/O failure talking to the server."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Request to {url} failed: {detail}")
        self.url = url
        self.detail = detail


@dataclass(eq=False)
class ProtocolError(OllamaError):
    status_code: int
    message: str

    def __str__(self) -> str:
        return self.message


class DecodeError(OllamaError):
    """A response line could not be decoded."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Malformed response line ({reason}): {line!r}")
        self.line = line
        self.reason = reason


class RequestEncodeError(OllamaError):
    """A request body could not be serialized to a JSON object."""
