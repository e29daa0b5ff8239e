# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""dockhand exceptions.

Every error carries a machine-readable ``kind`` next to its message, so
callers can branch on ``err.kind`` instead of matching strings.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a dockhand failure."""

    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    PROTOCOL = "protocol"
    TIMEOUT = "timeout"
    API = "api"


class DockhandError(Exception):
    """Base exception for dockhand errors."""

    kind: ErrorKind = ErrorKind.PROTOCOL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ConfigurationError(DockhandError):
    """A host string or logical request URL could not be understood."""

    kind = ErrorKind.CONFIGURATION


class ConnectionFailed(DockhandError, ConnectionError):
    """The daemon socket could not be created, connected to or written to."""

    kind = ErrorKind.CONNECTION


class ProtocolError(DockhandError):
    """The peer sent bytes that are not a well-formed response or frame."""

    kind = ErrorKind.PROTOCOL


class RequestTimeout(DockhandError, TimeoutError):
    """Connecting, sending or reading ran past the request deadline."""

    kind = ErrorKind.TIMEOUT


class APIError(DockhandError):
    """The daemon answered with an HTTP error status."""

    kind = ErrorKind.API

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
