"""Descriptor and value types shared by the endpoint callers."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str

    def header_value(self) -> str:
        credentials = f"{self.username}:{self.password}".encode("utf-8")
        return "Basic " + base64.b64encode(credentials).decode("ascii")


@dataclass(frozen=True)
class Endpoint:
    host: str
    path: str
    method: str = "POST"
    basic_auth: BasicAuth | None = None
    timeout_s: float = 10.0
    verbose: bool = True

    @property
    def url(self) -> str:
        return f"{self.host.rstrip('/')}{self.path}"


@dataclass(frozen=True)
class Fragment:
    """One decoded line of a response body."""

    text: str
    final: bool = False
    error: bool = False
    payload: dict[str, Any] | None = None


@dataclass(frozen=True)
class CallResult:
    response: str
    response_time_ms: int
    http_status_code: int


@runtime_checkable
class RequestBody(Protocol):
    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object sent as the request body."""


class FragmentDecoder(Protocol):
    def decode(self, payload: dict[str, Any]) -> Fragment:
        """Turn one decoded success line into a fragment."""


FragmentSink = Callable[[Fragment], None]
