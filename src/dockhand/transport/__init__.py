"""HTTP/1.1 transport over Unix-domain sockets."""

from .http import (
    MULTIPLEXED_STREAM,
    IncomingResponse,
    OutgoingRequest,
    build_request_head,
    parse_response,
)
from .unix import AsyncUnixSocketTransport, UnixSocketTransport

__all__ = [
    "AsyncUnixSocketTransport",
    "IncomingResponse",
    "MULTIPLEXED_STREAM",
    "OutgoingRequest",
    "UnixSocketTransport",
    "build_request_head",
    "parse_response",
]
