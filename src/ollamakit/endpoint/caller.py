"""Blocking endpoint caller."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from ollamakit.endpoint.codec import JsonCodec
from ollamakit.endpoint.reducer import LineReducer, success_only
from ollamakit.endpoint.transport import open_client, open_stream
from ollamakit.endpoint.types import CallResult, Endpoint, FragmentDecoder, FragmentSink, RequestBody
from ollamakit.errors import ProtocolError

logger = logging.getLogger(__name__)


class EndpointCaller:
    """Calls one endpoint and reduces its line-delimited body to a `CallResult`.

    Every call runs on the calling thread and blocks on network I/O. A fresh
    `httpx.Client` is opened per call; pass `transport` to route requests
    through a custom transport (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        endpoint: Endpoint,
        decoder: FragmentDecoder,
        *,
        codec: JsonCodec | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._decoder = decoder
        self._codec = codec or JsonCodec()
        self._transport = transport

    def call(self, body: Mapping[str, Any] | RequestBody) -> CallResult:
        return self._call(body, None)

    def call_streaming(self, body: Mapping[str, Any] | RequestBody, on_fragment: FragmentSink) -> CallResult:
        """Like `call`, but hands every decoded success fragment to `on_fragment` first."""
        return self._call(body, success_only(on_fragment))

    def _call(self, body: Mapping[str, Any] | RequestBody, sink: FragmentSink | None) -> CallResult:
        start = time.monotonic()
        content = self._codec.dumps(body)
        with open_client(self.endpoint, self._transport) as client:
            with open_stream(client, self.endpoint, content) as (status_code, lines):
                reducer = LineReducer(status_code, self._decoder, self._codec)
                text = reducer.consume(lines, sink)

        if status_code != 200:
            logger.error("Status code %s from %s", status_code, self.endpoint.url)
            raise ProtocolError(status_code=status_code, message=text)

        latency_ms = int((time.monotonic() - start) * 1000)
        result = CallResult(response=text.strip(), response_time_ms=latency_ms, http_status_code=status_code)
        if self.endpoint.verbose:
            logger.info("Model response: %s", result)
        return result
