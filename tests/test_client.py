from __future__ import annotations

import base64
import json

import httpx
import pytest

from ollamakit.client import OllamaClient
from ollamakit.config import ClientConfig
from ollamakit.endpoint.reducer import concatenating
from ollamakit.endpoint.types import Fragment
from ollamakit.errors import DecodeError, ProtocolError, TransportError
from ollamakit.mock import MockOllama, mock_embedding, mock_text
from ollamakit.models import ChatMessage, EmbeddingsRequest, GenerateRequest


def _client(mock: MockOllama, **kwargs) -> OllamaClient:
    transport = mock.transport()
    return OllamaClient("http://ollama.test/", verbose=False, transport=transport, async_transport=transport, **kwargs)


def test_generate_without_stream() -> None:
    mock = MockOllama()
    result = _client(mock).generate("mock-llama", "Is water wet?", options={"temperature": 0})

    assert result.response == mock_text("mock-llama", "Is water wet?")
    assert result.http_status_code == 200
    sent = json.loads(mock.requests[0].content)
    assert sent["stream"] is False
    assert sent["options"] == {"temperature": 0}
    assert str(mock.requests[0].url) == "http://ollama.test/api/generate"


def test_generate_streams_to_sink() -> None:
    mock = MockOllama()
    fragments: list[Fragment] = []

    result = _client(mock).generate("mock-llama", "hello", on_fragment=fragments.append)

    assert json.loads(mock.requests[0].content)["stream"] is True
    assert "".join(fragment.text for fragment in fragments) == result.response
    assert fragments[-1].final


def test_generate_request_with_concatenating_handler() -> None:
    seen: list[str] = []
    request = GenerateRequest(model="mock-llama", prompt="hello", system="be brief")

    result = _client(MockOllama()).generate_request(request, concatenating(seen.append))

    assert seen[-1] == result.response
    assert all(result.response.startswith(message) for message in seen)


def test_chat_returns_history() -> None:
    mock = MockOllama()
    messages = [ChatMessage(role="system", content="terse"), ChatMessage(role="user", content="hi")]

    result = _client(mock).chat("mock-chat", messages)

    assert result.response == mock_text("mock-chat", "terse hi")
    assert [message.role for message in result.chat_history] == ["system", "user", "assistant"]
    assert result.chat_history[-1].content == result.response
    assert len(messages) == 2
    assert str(mock.requests[0].url).endswith("/api/chat")


def test_unknown_model_is_protocol_error() -> None:
    with pytest.raises(ProtocolError, match="not found"):
        _client(MockOllama()).generate("missing", "hi")


def test_unauthorized_server() -> None:
    with pytest.raises(ProtocolError) as excinfo:
        _client(MockOllama(unauthorized=True)).chat("mock-chat", [ChatMessage(role="user", content="hi")])
    assert excinfo.value.message == "Unauthorized"


def test_basic_auth_flows_into_requests() -> None:
    mock = MockOllama()
    client = _client(mock)
    client.set_basic_auth("bob", "pw")
    client.generate("mock-llama", "hi")

    expected = "Basic " + base64.b64encode(b"bob:pw").decode("ascii")
    assert mock.requests[0].headers["Authorization"] == expected


def test_ping() -> None:
    assert _client(MockOllama()).ping()

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert not OllamaClient(transport=httpx.MockTransport(refuse)).ping()

    def garbled(request: httpx.Request) -> httpx.Response:
        raise httpx.DecodingError("bad gzip", request=request)

    def invalid(request: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid URL")

    assert not OllamaClient(transport=httpx.MockTransport(garbled)).ping()
    assert not OllamaClient(transport=httpx.MockTransport(invalid)).ping()


def test_embeddings() -> None:
    mock = MockOllama()
    vector = _client(mock).embeddings("mock-llama", "sky")

    assert vector == mock_embedding("mock-llama", "sky")
    assert all(-1.0 <= value <= 1.0 for value in vector)
    assert str(mock.requests[0].url) == "http://ollama.test/api/embeddings"
    assert json.loads(mock.requests[0].content) == {"model": "mock-llama", "prompt": "sky"}


def test_embeddings_request_options() -> None:
    mock = MockOllama()
    request = EmbeddingsRequest(model="mock-llama", prompt="sky", options={"num_ctx": 512}, keep_alive="5m")
    _client(mock).embeddings_request(request)

    sent = json.loads(mock.requests[0].content)
    assert sent["options"] == {"num_ctx": 512}
    assert sent["keep_alive"] == "5m"


def test_embeddings_errors() -> None:
    with pytest.raises(ProtocolError) as excinfo:
        _client(MockOllama()).embeddings("missing", "sky")
    assert excinfo.value.status_code == 404
    assert str(excinfo.value).startswith("404 - ")

    def no_vector(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"embedding": "nope"})

    with pytest.raises(DecodeError):
        OllamaClient(verbose=False, transport=httpx.MockTransport(no_vector)).embeddings("m", "sky")

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        OllamaClient(verbose=False, transport=httpx.MockTransport(refuse)).embeddings("m", "sky")


def test_from_config() -> None:
    config = ClientConfig(host="http://gpu-box:11434/", timeout_s=3.0, verbose=False, username="u", password="p")
    client = OllamaClient.from_config(config)

    endpoint = client.endpoint("/api/generate")
    assert endpoint.url == "http://gpu-box:11434/api/generate"
    assert endpoint.timeout_s == 3.0
    assert endpoint.basic_auth is not None and endpoint.basic_auth.username == "u"


@pytest.mark.asyncio
async def test_generate_async() -> None:
    mock = MockOllama()
    call = _client(mock).generate_async("mock-llama", "hello")

    state = await call.wait()

    assert state.succeeded
    assert call.response == mock_text("mock-llama", "hello")
    assert json.loads(mock.requests[0].content)["stream"] is True
    assert "".join(fragment.text for fragment in call.drain()) == call.response
