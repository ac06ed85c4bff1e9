"""JSON codec injected into the endpoint callers."""

from __future__ import annotations

import json
from typing import Any, Mapping

from ollamakit.endpoint.types import RequestBody
from ollamakit.errors import DecodeError, RequestEncodeError


class JsonCodec:
    def __init__(self, *, ensure_ascii: bool = False) -> None:
        self._ensure_ascii = ensure_ascii

    def dumps(self, body: Mapping[str, Any] | RequestBody) -> bytes:
        payload = body.to_dict() if isinstance(body, RequestBody) else body
        if not isinstance(payload, Mapping):
            raise RequestEncodeError(f"Request body must be a JSON object, got {type(payload).__name__}.")
        try:
            text = json.dumps(dict(payload), ensure_ascii=self._ensure_ascii, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise RequestEncodeError(f"Request body is not JSON serializable: {exc}") from exc
        return text.encode("utf-8")

    def loads(self, line: str) -> dict[str, Any]:
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise DecodeError(line, exc.msg) from exc
        if not isinstance(payload, dict):
            raise DecodeError(line, "expected a JSON object")
        return payload

    def error_message(self, line: str) -> str:
        payload = self.loads(line)
        error = payload.get("error")
        if error is None:
            return ""
        return error if isinstance(error, str) else str(error)
