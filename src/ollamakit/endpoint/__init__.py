"""Endpoint-calling protocol core: transport, status handling, line reduction, callers."""

from ollamakit.endpoint.async_call import AsyncCall, CallState, CallStatus
from ollamakit.endpoint.caller import EndpointCaller
from ollamakit.endpoint.codec import JsonCodec
from ollamakit.endpoint.decoders import ChatDecoder, GenerateDecoder
from ollamakit.endpoint.reducer import LineReducer, concatenating
from ollamakit.endpoint.status import StatusClass, classify
from ollamakit.endpoint.types import BasicAuth, CallResult, Endpoint, Fragment, FragmentSink, RequestBody

__all__ = [
    "AsyncCall",
    "BasicAuth",
    "CallResult",
    "CallState",
    "CallStatus",
    "ChatDecoder",
    "Endpoint",
    "EndpointCaller",
    "Fragment",
    "FragmentSink",
    "GenerateDecoder",
    "JsonCodec",
    "LineReducer",
    "RequestBody",
    "StatusClass",
    "classify",
    "concatenating",
]
