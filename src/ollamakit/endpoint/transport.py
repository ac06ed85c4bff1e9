"""HTTP transport for the endpoint callers."""

from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

import httpx

from ollamakit.endpoint.types import Endpoint
from ollamakit.errors import TransportError


# Raised while building, sending or decoding a request. InvalidURL is not an HTTPError.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def build_headers(endpoint: Endpoint) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if endpoint.basic_auth is not None:
        headers["Authorization"] = endpoint.basic_auth.header_value()
    return headers


def build_timeout(endpoint: Endpoint) -> httpx.Timeout:
    return httpx.Timeout(endpoint.timeout_s, connect=endpoint.timeout_s, read=endpoint.timeout_s)


@contextmanager
def open_client(endpoint: Endpoint, transport: httpx.BaseTransport | None = None) -> Iterator[httpx.Client]:
    with httpx.Client(transport=transport, timeout=build_timeout(endpoint)) as client:
        yield client


@asynccontextmanager
async def open_async_client(
    endpoint: Endpoint,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=transport, timeout=build_timeout(endpoint)) as client:
        yield client


@contextmanager
def open_stream(
    client: httpx.Client,
    endpoint: Endpoint,
    content: bytes,
) -> Iterator[tuple[int, Iterator[str]]]:
    """Send `content` and yield the status code with a lazy line iterator.

    The response is closed when the block exits, whatever the outcome.
    """
    try:
        with client.stream(
            endpoint.method,
            endpoint.url,
            content=content,
            headers=build_headers(endpoint),
        ) as response:
            response.encoding = "utf-8"
            yield response.status_code, response.iter_lines()
    except REQUEST_ERRORS as exc:
        raise TransportError(endpoint.url, str(exc) or type(exc).__name__) from exc


@asynccontextmanager
async def open_async_stream(
    client: httpx.AsyncClient,
    endpoint: Endpoint,
    content: bytes,
) -> AsyncIterator[tuple[int, AsyncIterator[str]]]:
    try:
        async with client.stream(
            endpoint.method,
            endpoint.url,
            content=content,
            headers=build_headers(endpoint),
        ) as response:
            response.encoding = "utf-8"
            yield response.status_code, response.aiter_lines()
    except REQUEST_ERRORS as exc:
        raise TransportError(endpoint.url, str(exc) or type(exc).__name__) from exc
