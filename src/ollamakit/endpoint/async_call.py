"""Non-blocking endpoint call backed by an asyncio task."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
import logging
import time
from typing import Any, Mapping

import httpx

from ollamakit.endpoint.codec import JsonCodec
from ollamakit.endpoint.reducer import LineReducer
from ollamakit.endpoint.transport import open_async_client, open_async_stream
from ollamakit.endpoint.types import Endpoint, Fragment, FragmentDecoder, RequestBody
from ollamakit.errors import OllamaError, ProtocolError

logger = logging.getLogger(__name__)

FAILED_PREFIX = "[FAILED] "


class CallStatus(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CallState:
    status: CallStatus = CallStatus.CREATED
    http_status_code: int | None = None
    response_time_ms: int = 0
    response: str = ""

    @property
    def complete(self) -> bool:
        return self.status in (CallStatus.SUCCEEDED, CallStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.status is CallStatus.SUCCEEDED


class AsyncCall:
    """Handle for a call that runs on its own task.

    Only the task writes the state and the fragment queue. Observers poll
    `is_complete()` or drain `fragments`; a failure is recorded as data, so
    check `is_succeeded()` before trusting `response`. There is no cancel:
    once started the call runs until it succeeds or fails.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        body: Mapping[str, Any] | RequestBody,
        decoder: FragmentDecoder,
        *,
        codec: JsonCodec | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._body = body
        self._decoder = decoder
        self._codec = codec or JsonCodec()
        self._transport = transport
        self._state = CallState()
        self._task: asyncio.Task[CallState] | None = None
        self.fragments: asyncio.Queue[Fragment] = asyncio.Queue()

    @property
    def state(self) -> CallState:
        return self._state

    @property
    def response(self) -> str:
        return self._state.response

    @property
    def http_status_code(self) -> int | None:
        return self._state.http_status_code

    @property
    def response_time_ms(self) -> int:
        return self._state.response_time_ms

    def is_complete(self) -> bool:
        return self._state.complete

    def is_succeeded(self) -> bool:
        return self._state.succeeded

    def start(self) -> "AsyncCall":
        """Schedule the call on the running event loop."""
        if self._task is not None:
            raise RuntimeError("AsyncCall has already been started.")
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    async def wait(self) -> CallState:
        if self._task is None:
            raise RuntimeError("AsyncCall has not been started.")
        return await asyncio.shield(self._task)

    def drain(self) -> list[Fragment]:
        drained: list[Fragment] = []
        while True:
            try:
                drained.append(self.fragments.get_nowait())
            except asyncio.QueueEmpty:
                return drained

    async def _run(self) -> CallState:
        self._state = replace(self._state, status=CallStatus.RUNNING)
        start = time.monotonic()
        status_code: int | None = None
        try:
            content = self._codec.dumps(self._body)
            async with open_async_client(self.endpoint, self._transport) as client:
                async with open_async_stream(client, self.endpoint, content) as (status_code, lines):
                    self._state = replace(self._state, http_status_code=status_code)
                    reducer = LineReducer(status_code, self._decoder, self._codec)
                    text = await reducer.aconsume(lines, self.fragments.put_nowait)
            if status_code != 200:
                raise ProtocolError(status_code=status_code, message=text)
        except OllamaError as exc:
            logger.error("Async call to %s failed: %s", self.endpoint.url, exc)
            self._state = CallState(
                status=CallStatus.FAILED,
                http_status_code=status_code,
                response_time_ms=_elapsed_ms(start),
                response=f"{FAILED_PREFIX}{exc}",
            )
            return self._state
        except Exception as exc:
            logger.exception("Async call to %s failed", self.endpoint.url)
            self._state = CallState(
                status=CallStatus.FAILED,
                http_status_code=status_code,
                response_time_ms=_elapsed_ms(start),
                response=f"{FAILED_PREFIX}{exc}",
            )
            return self._state

        self._state = CallState(
            status=CallStatus.SUCCEEDED,
            http_status_code=status_code,
            response_time_ms=_elapsed_ms(start),
            response=text,
        )
        if self.endpoint.verbose:
            logger.info("Model response: %s", text)
        return self._state


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
