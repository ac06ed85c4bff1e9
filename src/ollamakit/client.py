"""High-level client for an Ollama server."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import TYPE_CHECKING, Any

import httpx

from ollamakit.endpoint.async_call import AsyncCall
from ollamakit.endpoint.caller import EndpointCaller
from ollamakit.endpoint.codec import JsonCodec
from ollamakit.endpoint.decoders import ChatDecoder, GenerateDecoder
from ollamakit.endpoint.transport import REQUEST_ERRORS, build_headers, open_client
from ollamakit.endpoint.types import BasicAuth, CallResult, Endpoint, FragmentSink
from ollamakit.errors import DecodeError, ProtocolError, TransportError
from ollamakit.models import ChatMessage, ChatRequest, ChatResult, EmbeddingsRequest, GenerateRequest

if TYPE_CHECKING:
    from ollamakit.config import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:11434"


class OllamaClient:
    """Blocking and non-blocking access to the generate, chat and embeddings endpoints.

    Example:
        client = OllamaClient("http://localhost:11434")
        result = client.generate("llama3", "Why is the sky blue?")
        print(result.response)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        *,
        timeout_s: float = 10.0,
        verbose: bool = True,
        basic_auth: BasicAuth | None = None,
        codec: JsonCodec | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.timeout_s = timeout_s
        self.verbose = verbose
        self.basic_auth = basic_auth
        self._codec = codec or JsonCodec()
        self._transport = transport
        self._async_transport = async_transport

    @classmethod
    def from_config(cls, config: "ClientConfig", **kwargs: Any) -> "OllamaClient":
        return cls(
            config.host,
            timeout_s=config.timeout_s,
            verbose=config.verbose,
            basic_auth=config.basic_auth,
            **kwargs,
        )

    def set_basic_auth(self, username: str, password: str) -> None:
        """Use Basic auth, e.g. for a server behind a reverse proxy."""
        self.basic_auth = BasicAuth(username, password)

    def endpoint(self, path: str, method: str = "POST") -> Endpoint:
        return Endpoint(
            host=self.host,
            path=path,
            method=method,
            basic_auth=self.basic_auth,
            timeout_s=self.timeout_s,
            verbose=self.verbose,
        )

    def ping(self) -> bool:
        endpoint = self.endpoint("/api/tags", method="GET")
        try:
            with open_client(endpoint, self._transport) as client:
                response = client.get(endpoint.url, headers=build_headers(endpoint))
        except REQUEST_ERRORS as exc:
            logger.debug("Ping to %s failed: %s", endpoint.url, exc)
            return False
        return response.status_code == 200

    def generate(
        self,
        model: str,
        prompt: str,
        *,
        options: dict[str, Any] | None = None,
        images: list[str] | None = None,
        on_fragment: FragmentSink | None = None,
    ) -> CallResult:
        """Generate a completion; `images` are base64-encoded strings."""
        request = GenerateRequest(model=model, prompt=prompt, images=images, options=options)
        return self.generate_request(request, on_fragment)

    def generate_request(self, request: GenerateRequest, on_fragment: FragmentSink | None = None) -> CallResult:
        caller = EndpointCaller(
            self.endpoint("/api/generate"),
            GenerateDecoder(),
            codec=self._codec,
            transport=self._transport,
        )
        if on_fragment is None:
            return caller.call(replace(request, stream=False))
        return caller.call_streaming(replace(request, stream=True), on_fragment)

    def generate_async(
        self,
        model: str,
        prompt: str,
        *,
        options: dict[str, Any] | None = None,
    ) -> AsyncCall:
        """Start a streamed generate call and return its handle immediately.

        Must be called while an event loop is running.
        """
        request = GenerateRequest(model=model, prompt=prompt, options=options, stream=True)
        call = AsyncCall(
            self.endpoint("/api/generate"),
            request,
            GenerateDecoder(),
            codec=self._codec,
            transport=self._async_transport,
        )
        return call.start()

    def embeddings(
        self,
        model: str,
        prompt: str,
        *,
        options: dict[str, Any] | None = None,
    ) -> list[float]:
        request = EmbeddingsRequest(model=model, prompt=prompt, options=options)
        return self.embeddings_request(request)

    def embeddings_request(self, request: EmbeddingsRequest) -> list[float]:
        """Fetch the embedding vector for one prompt; the reply is a single JSON object."""
        endpoint = self.endpoint("/api/embeddings")
        content = self._codec.dumps(request)
        try:
            with open_client(endpoint, self._transport) as client:
                response = client.post(endpoint.url, content=content, headers=build_headers(endpoint))
                response.encoding = "utf-8"
                text = response.text
        except REQUEST_ERRORS as exc:
            raise TransportError(endpoint.url, str(exc) or type(exc).__name__) from exc

        if response.status_code != 200:
            logger.error("Embeddings call to %s failed with status %s", endpoint.url, response.status_code)
            raise ProtocolError(status_code=response.status_code, message=f"{response.status_code} - {text}")

        vector = self._codec.loads(text).get("embedding")
        if not isinstance(vector, list) or not all(
            isinstance(value, (int, float)) and not isinstance(value, bool) for value in vector
        ):
            raise DecodeError(text, "'embedding' is not a list of numbers")
        return [float(value) for value in vector]

    def chat(
        self,
        model: str,
        messages: list[ChatMessage],
        *,
        options: dict[str, Any] | None = None,
        on_fragment: FragmentSink | None = None,
    ) -> ChatResult:
        request = ChatRequest(model=model, messages=list(messages), options=options)
        return self.chat_request(request, on_fragment)

    def chat_request(self, request: ChatRequest, on_fragment: FragmentSink | None = None) -> ChatResult:
        caller = EndpointCaller(
            self.endpoint("/api/chat"),
            ChatDecoder(),
            codec=self._codec,
            transport=self._transport,
        )
        if on_fragment is None:
            result = caller.call(replace(request, stream=False))
        else:
            result = caller.call_streaming(replace(request, stream=True), on_fragment)
        history = [*request.messages, ChatMessage(role="assistant", content=result.response)]
        return ChatResult(
            response=result.response,
            response_time_ms=result.response_time_ms,
            http_status_code=result.http_status_code,
            chat_history=history,
        )
