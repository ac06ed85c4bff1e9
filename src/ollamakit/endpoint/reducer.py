"""Folding of newline-delimited JSON bodies into a single response text."""

from __future__ import annotations

from typing import AsyncIterable, Callable, Iterable

from ollamakit.endpoint.codec import JsonCodec
from ollamakit.endpoint.status import StatusClass, classify, error_text
from ollamakit.endpoint.types import Fragment, FragmentDecoder, FragmentSink


class LineReducer:
    """Decodes body lines for one call and accumulates their text.

    The decoding policy is fixed by the status code at construction. Reading
    stops at the first fragment marked final; later lines are never pulled
    from the body.
    """

    def __init__(self, status_code: int, decoder: FragmentDecoder, codec: JsonCodec) -> None:
        self.status_code = status_code
        self.status = classify(status_code)
        self._decoder = decoder
        self._codec = codec
        self._parts: list[str] = []
        self.finished = False
        self.lines_read = 0

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def decode(self, line: str) -> Fragment | None:
        if not line.strip():
            return None
        if self.status is StatusClass.SUCCESS:
            return self._decoder.decode(self._codec.loads(line))
        return Fragment(text=error_text(self.status, line, self._codec), error=True)

    def fold(self, fragment: Fragment) -> None:
        # Terminal metadata lines carry no new text.
        if not (fragment.final and not fragment.text):
            self._parts.append(fragment.text)
        if fragment.final:
            self.finished = True

    def _feed(self, line: str, sink: FragmentSink | None) -> None:
        self.lines_read += 1
        fragment = self.decode(line)
        if fragment is None:
            return
        if sink is not None:
            sink(fragment)
        self.fold(fragment)

    def _unauthorized(self, sink: FragmentSink | None) -> str:
        fragment = Fragment(text=error_text(self.status, "", self._codec), final=True, error=True)
        if sink is not None:
            sink(fragment)
        self.fold(fragment)
        return self.text

    def consume(self, lines: Iterable[str], sink: FragmentSink | None = None) -> str:
        if not self.status.reads_body:
            return self._unauthorized(sink)
        for line in lines:
            self._feed(line, sink)
            if self.finished:
                break
        return self.text

    async def aconsume(self, lines: AsyncIterable[str], sink: FragmentSink | None = None) -> str:
        if not self.status.reads_body:
            return self._unauthorized(sink)
        async for line in lines:
            self._feed(line, sink)
            if self.finished:
                break
        return self.text


def success_only(sink: FragmentSink) -> FragmentSink:
    def forward(fragment: Fragment) -> None:
        if not fragment.error:
            sink(fragment)

    return forward


def concatenating(handler: Callable[[str], None]) -> FragmentSink:
    """Adapt a handler that wants the whole message received so far."""
    parts: list[str] = []

    def forward(fragment: Fragment) -> None:
        if fragment.error or not fragment.text:
            return
        parts.append(fragment.text)
        handler("".join(parts))

    return forward
