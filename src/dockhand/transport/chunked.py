"""Decoding of HTTP/1.1 chunked transfer-encoded bodies.

Format per RFC 9112 section 7.1::

    chunk-size [; ext] CRLF chunk-data CRLF   (repeated)
    0 CRLF [trailers] CRLF

The decoder works on a complete, already-read buffer. By default it is
lenient: the first malformed chunk stops decoding and whatever was decoded
before it is returned. Pass ``strict=True`` to get a ``ProtocolError``
instead.
"""

from __future__ import annotations

import logging
import re

from ..errors import ProtocolError

logger = logging.getLogger(__name__)

CRLF = b"\r\n"

_HEX_SIZE = re.compile(rb"[0-9A-Fa-f]+")


def decode(body: bytes, *, strict: bool = False) -> bytes:
    """Decode a chunked body into its raw payload bytes.

    Args:
        body: The full response body as received.
        strict: Raise ``ProtocolError`` on malformed input instead of
            returning the bytes decoded so far.

    Returns:
        The concatenated chunk data.
    """
    result = bytearray()
    pos = 0
    end = len(body)

    def give_up(reason: str) -> bytes:
        if strict:
            raise ProtocolError(f"malformed chunked body at offset {pos}: {reason}")
        logger.debug(
            "Stopping chunked decode at offset %d (%s); %d bytes dropped",
            pos, reason, end - pos,
        )
        return bytes(result)

    while pos < end:
        eol = body.find(CRLF, pos)
        if eol < 0:
            return give_up("chunk-size line has no CRLF")

        size_field = body[pos:eol].split(b";", 1)[0].strip()
        if not _HEX_SIZE.fullmatch(size_field):
            return give_up(f"invalid chunk size {size_field!r}")
        size = int(size_field, 16)

        if size == 0:
            # Trailer section, if any, is ignored.
            return bytes(result)

        data_start = eol + len(CRLF)
        data_end = data_start + size
        if data_end > end:
            return give_up(f"chunk of {size} bytes is truncated")

        result += body[data_start:data_end]
        pos = data_end

        if body.startswith(CRLF, pos):
            pos += len(CRLF)
        elif strict and pos < end:
            raise ProtocolError(f"missing CRLF after chunk data at offset {pos}")

    if strict:
        raise ProtocolError("chunked body ended without a zero-size chunk")
    return bytes(result)
