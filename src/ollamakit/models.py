"""Request payloads and results for the generate and chat endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ollamakit.endpoint.types import CallResult

ROLES = ("system", "user", "assistant", "tool")


@dataclass
class ChatMessage:
    role: str
    content: str
    images: list[str] | None = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported chat role: {self.role}")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.images:
            payload["images"] = list(self.images)
        return payload


def _add_optional(payload: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        payload[key] = value


@dataclass
class GenerateRequest:
    model: str
    prompt: str
    images: list[str] | None = None
    options: dict[str, Any] | None = None
    stream: bool = False
    format: str | dict[str, Any] | None = None
    system: str | None = None
    template: str | None = None
    context: list[int] | None = None
    raw: bool | None = None
    keep_alive: str | int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "stream": self.stream,
        }
        _add_optional(payload, "images", self.images)
        _add_optional(payload, "options", self.options)
        _add_optional(payload, "format", self.format)
        _add_optional(payload, "system", self.system)
        _add_optional(payload, "template", self.template)
        _add_optional(payload, "context", self.context)
        _add_optional(payload, "raw", self.raw)
        _add_optional(payload, "keep_alive", self.keep_alive)
        return payload


@dataclass
class ChatRequest:
    model: str
    messages: list[ChatMessage] = field(default_factory=list)
    options: dict[str, Any] | None = None
    stream: bool = False
    format: str | dict[str, Any] | None = None
    template: str | None = None
    keep_alive: str | int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
            "stream": self.stream,
        }
        _add_optional(payload, "options", self.options)
        _add_optional(payload, "format", self.format)
        _add_optional(payload, "template", self.template)
        _add_optional(payload, "keep_alive", self.keep_alive)
        return payload


@dataclass
class EmbeddingsRequest:
    model: str
    prompt: str
    options: dict[str, Any] | None = None
    keep_alive: str | int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.model, "prompt": self.prompt}
        _add_optional(payload, "options", self.options)
        _add_optional(payload, "keep_alive", self.keep_alive)
        return payload


@dataclass(frozen=True)
class ChatResult(CallResult):
    chat_history: list[ChatMessage] = field(default_factory=list)
