"""Per-endpoint decoders for streamed success lines."""

from __future__ import annotations

from typing import Any

from ollamakit.endpoint.types import Fragment
from ollamakit.errors import DecodeError


def _text_field(value: Any, field: str, payload: dict[str, Any]) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise DecodeError(str(payload), f"field {field!r} is not a string")


class GenerateDecoder:
    """Lines of `/api/generate`: `{"response": "...", "done": bool}`."""

    def decode(self, payload: dict[str, Any]) -> Fragment:
        text = _text_field(payload.get("response"), "response", payload)
        return Fragment(text=text, final=bool(payload.get("done", False)), payload=payload)


class ChatDecoder:
    """Lines of `/api/chat`: `{"message": {"role": ..., "content": "..."}, "done": bool}`."""

    def decode(self, payload: dict[str, Any]) -> Fragment:
        message = payload.get("message") or {}
        if not isinstance(message, dict):
            raise DecodeError(str(payload), "field 'message' is not an object")
        text = _text_field(message.get("content"), "message.content", payload)
        return Fragment(text=text, final=bool(payload.get("done", False)), payload=payload)
