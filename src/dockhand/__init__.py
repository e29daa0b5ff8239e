"""dockhand: HTTP/1.1 over the Docker daemon's Unix socket.

Provides the Unix-socket transport, the multiplexed stream codec and a thin
async client on top of them.
"""

__version__ = "0.1.0"

from .auth import RegistryAuth, RegistryIdentityToken
from .client import DockerClient
from .errors import (
    APIError,
    ConfigurationError,
    ConnectionFailed,
    DockhandError,
    ErrorKind,
    ProtocolError,
    RequestTimeout,
)
from .host import TCP, ConnectionTarget, UnixSocket, parse, resolve_host
from .stream import LogFrame, StreamType
from .transport import (
    AsyncUnixSocketTransport,
    IncomingResponse,
    OutgoingRequest,
    UnixSocketTransport,
)

__all__ = [
    "APIError",
    "AsyncUnixSocketTransport",
    "ConfigurationError",
    "ConnectionFailed",
    "ConnectionTarget",
    "DockerClient",
    "DockhandError",
    "ErrorKind",
    "IncomingResponse",
    "LogFrame",
    "OutgoingRequest",
    "ProtocolError",
    "RegistryAuth",
    "RegistryIdentityToken",
    "RequestTimeout",
    "StreamType",
    "TCP",
    "UnixSocket",
    "UnixSocketTransport",
    "__version__",
    "parse",
    "resolve_host",
]
