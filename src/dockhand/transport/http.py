# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""HTTP/1.1 request serialization and response parsing.

These are the byte-level halves of the Unix-socket transport, kept free of
any socket handling so both the blocking and the asyncio transport share
them and tests can feed them literal bytes.
"""

from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import httpx

from ..errors import ConfigurationError, ProtocolError
from . import chunked

CRLF = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"

MULTIPLEXED_STREAM = "application/vnd.docker.multiplexed-stream"

# Headers the transport always writes itself.
_MANAGED_HEADERS = frozenset({"host", "connection", "content-length"})

# Bytes that would end a header line early.
_FORBIDDEN_HEADER_BYTES = (b"\r", b"\n", b"\0")
_FORBIDDEN_NAME_BYTES = _FORBIDDEN_HEADER_BYTES + (b" ", b"\t", b":")


@dataclass
class OutgoingRequest:
    """An HTTP request before it is put on the wire.

    ``url`` is either a path with optional query (``/v1.53/_ping``) or an
    absolute logical URL (``http://localhost/v1.53/_ping``). The socket path
    never appears in it.
    """

    method: str
    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers)
        if self.body is None:
            self.body = b""


@dataclass
class IncomingResponse:
    """A fully read HTTP response."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""
    reason_phrase: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers)

    @property
    def content_type(self) -> str:
        """Media type without parameters, lower-cased."""
        return self.headers.get("content-type", "").split(";", 1)[0].strip().lower()

    @property
    def is_multiplexed(self) -> bool:
        return self.content_type == MULTIPLEXED_STREAM

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return jsonlib.loads(self.body)


def resolve_url(url: str, host: str = "localhost") -> httpx.URL:
    """Turn a request ``url`` into an absolute logical URL.

    Relative URLs are joined against ``http://<host>``. Whether ``url`` is
    absolute is decided from its scheme, so ``http:///path`` is an error
    rather than a path on ``host``.

    Raises:
        ConfigurationError: If the result has no host.
    """
    if not url:
        raise ConfigurationError("request URL must not be empty")
    try:
        parts = urlsplit(url)
        if parts.scheme and not parts.hostname:
            raise ConfigurationError(f"request URL {url!r} has no host")
        if parts.scheme:
            resolved = httpx.URL(url)
        else:
            resolved = httpx.URL(f"http://{host}").join(url)
    except (ValueError, httpx.InvalidURL) as e:
        raise ConfigurationError(f"invalid request URL {url!r}: {e}") from None

    if not resolved.host:
        raise ConfigurationError(f"request URL {url!r} has no host")
    return resolved


def build_request_head(request: OutgoingRequest, host: str = "localhost") -> bytes:
    """Serialize the request line and header block, including the blank line.

    Raises:
        ConfigurationError: If the URL cannot be resolved, or the method or a
            header contains a line break, NUL or (for the method and header
            names) whitespace.
    """
    url = resolve_url(request.url, host)
    target = url.raw_path.decode("ascii") or "/"

    method = request.method.upper()
    if not method or any(c.isspace() or c == "\0" for c in method):
        raise ConfigurationError(f"invalid request method: {request.method!r}")

    lines = [
        f"{method} {target} HTTP/1.1",
        f"Host: {url.netloc.decode('ascii')}",
        "Connection: close",
    ]
    for raw_name, raw_value in request.headers.raw:
        if not raw_name or any(b in raw_name for b in _FORBIDDEN_NAME_BYTES):
            raise ConfigurationError(f"invalid header name: {raw_name!r}")
        if any(b in raw_value for b in _FORBIDDEN_HEADER_BYTES):
            raise ConfigurationError(f"invalid value for header {raw_name.decode('latin-1')!r}")
        if raw_name.lower().decode("latin-1") in _MANAGED_HEADERS:
            continue
        lines.append(f"{raw_name.decode('latin-1')}: {raw_value.decode('latin-1')}")
    if request.body:
        lines.append(f"Content-Length: {len(request.body)}")

    return ("\r\n".join(lines)).encode("latin-1") + HEADER_TERMINATOR


def parse_response(raw: bytes, *, strict: bool = False) -> IncomingResponse:
    """Parse a complete HTTP/1.1 response read up to EOF.

    Duplicate header names keep the last value. A body shorter than its
    ``Content-Length`` is returned as-is.

    Args:
        raw: Every byte received before the peer closed the connection.
        strict: Passed to the chunked decoder.

    Raises:
        ProtocolError: If there is no header/body delimiter or the status
            code is not an integer.
    """
    head, sep, body = raw.partition(HEADER_TERMINATOR)
    if not sep:
        raise ProtocolError(
            f"response has no header/body delimiter ({len(raw)} bytes received)"
        )

    lines = head.decode("latin-1").split("\r\n")
    status_line = lines[0]
    parts = status_line.split(" ", 2)
    if len(parts) < 2 or not (parts[1].isascii() and parts[1].isdigit()):
        raise ProtocolError(f"malformed status line: {status_line!r}")
    status_code = int(parts[1])
    reason = parts[2] if len(parts) > 2 else ""

    # Last occurrence wins; every occurrence counts for chunked detection.
    fields: dict[str, tuple[str, str]] = {}
    is_chunked = False
    for line in lines[1:]:
        name, colon, value = line.partition(":")
        if not colon:
            continue
        name = name.strip()
        value = value.strip()
        key = name.lower()
        fields[key] = (name, value)
        if key == "transfer-encoding" and "chunked" in value.lower():
            is_chunked = True

    if is_chunked:
        body = chunked.decode(body, strict=strict)

    return IncomingResponse(
        status_code=status_code,
        headers=httpx.Headers(list(fields.values())),
        body=body,
        reason_phrase=reason,
    )
