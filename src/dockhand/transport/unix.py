# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""HTTP/1.1 over a Unix-domain socket.

Each ``send`` opens its own connection, writes one request with
``Connection: close``, reads until the daemon hangs up, and closes the
socket before returning. There is no pooling and no shared state, so any
number of transports (and concurrent calls on one transport) can coexist.
"""

from __future__ import annotations

import asyncio
import logging
import socket
import time

from ..errors import ConnectionFailed, DockhandError, RequestTimeout
from .http import IncomingResponse, OutgoingRequest, build_request_head, parse_response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0
RECV_SIZE = 65536


class UnixSocketTransport:
    """Blocking transport for a Docker daemon socket.

    Usage:
        transport = UnixSocketTransport("/var/run/docker.sock")
        response = transport.send(OutgoingRequest("GET", "/v1.53/_ping"))

    Args:
        path: Filesystem path of the socket.
        host: Logical host written to the ``Host`` header of relative URLs.
        timeout: Default deadline in seconds for a whole exchange.
        strict: Reject malformed chunked bodies instead of truncating them.
    """

    def __init__(
        self,
        path: str,
        *,
        host: str = "localhost",
        timeout: float = DEFAULT_TIMEOUT,
        strict: bool = False,
    ):
        self.path = path
        self.host = host
        self.timeout = timeout
        self.strict = strict

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    def send(self, request: OutgoingRequest, timeout: float | None = None) -> IncomingResponse:
        """Send one request and return the fully read response.

        Raises:
            ConfigurationError: The request URL has no usable host.
            ConnectionFailed: The socket could not be created, connected or written.
            RequestTimeout: The exchange did not finish within ``timeout``.
            ProtocolError: The response could not be parsed.
        """
        head = build_request_head(request, self.host)
        deadline = time.monotonic() + (self.timeout if timeout is None else timeout)

        logger.debug("%s %s via %s", request.method, request.url, self.path)
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as e:
            raise ConnectionFailed(f"cannot create socket for {self.path}: {e}") from e

        with sock:
            try:
                sock.settimeout(self._remaining(deadline))
                sock.connect(self.path)
            except DockhandError:
                raise
            except TimeoutError as e:
                raise RequestTimeout(f"timed out connecting to {self.path}") from e
            except OSError as e:
                raise ConnectionFailed(f"cannot connect to {self.path}: {e}") from e

            try:
                sock.settimeout(self._remaining(deadline))
                sock.sendall(head + request.body)
                raw = self._read_all(sock, deadline)
            except DockhandError:
                raise
            except TimeoutError as e:
                raise RequestTimeout(f"timed out talking to {self.path}") from e
            except OSError as e:
                raise ConnectionFailed(f"connection to {self.path} failed: {e}") from e

        response = parse_response(raw, strict=self.strict)
        logger.debug(
            "%s %s -> %d (%d bytes)",
            request.method, request.url, response.status_code, len(response.body),
        )
        return response

    def _read_all(self, sock: socket.socket, deadline: float) -> bytes:
        chunks: list[bytes] = []
        while True:
            sock.settimeout(self._remaining(deadline))
            data = sock.recv(RECV_SIZE)
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks)

    def _remaining(self, deadline: float) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise RequestTimeout(f"request to {self.path} exceeded its deadline")
        return remaining


class AsyncUnixSocketTransport:
    """Asyncio flavour of :class:`UnixSocketTransport`.

    Timeouts and task cancellation both abandon the exchange and close the
    connection before the exception propagates.
    """

    def __init__(
        self,
        path: str,
        *,
        host: str = "localhost",
        timeout: float = DEFAULT_TIMEOUT,
        strict: bool = False,
    ):
        self.path = path
        self.host = host
        self.timeout = timeout
        self.strict = strict

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    async def send(
        self, request: OutgoingRequest, timeout: float | None = None
    ) -> IncomingResponse:
        """Send one request and return the fully read response.

        Raises the same errors as :meth:`UnixSocketTransport.send`.
        """
        head = build_request_head(request, self.host)
        timeout = self.timeout if timeout is None else timeout

        logger.debug("%s %s via %s", request.method, request.url, self.path)
        try:
            raw = await asyncio.wait_for(self._exchange(head + request.body), timeout)
        except asyncio.TimeoutError as e:
            raise RequestTimeout(
                f"request to {self.path} timed out after {timeout}s"
            ) from e

        response = parse_response(raw, strict=self.strict)
        logger.debug(
            "%s %s -> %d (%d bytes)",
            request.method, request.url, response.status_code, len(response.body),
        )
        return response

    async def _exchange(self, payload: bytes) -> bytes:
        try:
            reader, writer = await asyncio.open_unix_connection(self.path)
        except OSError as e:
            raise ConnectionFailed(f"cannot connect to {self.path}: {e}") from e

        try:
            writer.write(payload)
            await writer.drain()
            return await reader.read()
        except OSError as e:
            raise ConnectionFailed(f"connection to {self.path} failed: {e}") from e
        finally:
            writer.close()
