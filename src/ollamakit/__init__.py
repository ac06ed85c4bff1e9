"""Client for Ollama's generate, chat and embeddings endpoints, blocking and non-blocking."""

from ollamakit.client import OllamaClient
from ollamakit.config import ClientConfig, resolve_config
from ollamakit.endpoint import (
    AsyncCall,
    BasicAuth,
    CallResult,
    CallState,
    CallStatus,
    Endpoint,
    EndpointCaller,
    Fragment,
    JsonCodec,
    concatenating,
)
from ollamakit.errors import DecodeError, OllamaError, ProtocolError, RequestEncodeError, TransportError
from ollamakit.models import ChatMessage, ChatRequest, ChatResult, EmbeddingsRequest, GenerateRequest

__version__ = "0.1.0"

__all__ = [
    "AsyncCall",
    "BasicAuth",
    "CallResult",
    "CallState",
    "CallStatus",
    "ChatMessage",
    "ChatRequest",
    "ChatResult",
    "ClientConfig",
    "DecodeError",
    "EmbeddingsRequest",
    "Endpoint",
    "EndpointCaller",
    "Fragment",
    "GenerateRequest",
    "JsonCodec",
    "OllamaClient",
    "OllamaError",
    "ProtocolError",
    "RequestEncodeError",
    "TransportError",
    "concatenating",
    "resolve_config",
]
