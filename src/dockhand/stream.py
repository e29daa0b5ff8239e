# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Docker multiplexed stream codec.

When a container runs without a TTY, the daemon multiplexes stdout and
stderr of logs, exec and attach endpoints into one byte stream. Each frame
has an 8-byte header:

    byte 0      stream type (0 = stdin, 1 = stdout, 2 = stderr)
    bytes 1-3   zero padding
    bytes 4-7   payload length, big-endian uint32

followed by the payload. Decoding is lenient by default: unknown stream
types are read as stdout and an incomplete trailing frame is dropped.
``strict=True`` turns both into a ``ProtocolError``.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum

from .errors import ProtocolError

logger = logging.getLogger(__name__)

HEADER_SIZE = 8
_HEADER = struct.Struct(">BxxxI")


class StreamType(IntEnum):
    """Stream a frame was written to."""

    STDIN = 0
    STDOUT = 1
    STDERR = 2


@dataclass(frozen=True)
class LogFrame:
    """A single decoded frame."""

    stream: StreamType
    payload: bytes

    @property
    def text(self) -> str | None:
        """The payload as UTF-8, or None if it is not valid UTF-8."""
        try:
            return self.payload.decode("utf-8")
        except UnicodeDecodeError:
            return None


def encode(stream: StreamType | int, payload: bytes) -> bytes:
    """Encode ``payload`` as one frame on ``stream``."""
    return _HEADER.pack(StreamType(stream), len(payload)) + payload


def decode(buffer: bytes, *, strict: bool = False) -> list[LogFrame]:
    """Decode every complete frame in ``buffer``, in order.

    Zero-length frames produce nothing.

    Raises:
        ProtocolError: Only with ``strict=True``, for an unknown stream
            type or trailing bytes that do not form a whole frame.
    """
    frames: list[LogFrame] = []
    view = memoryview(buffer)
    pos = 0
    end = len(view)

    while end - pos >= HEADER_SIZE:
        code, size = _HEADER.unpack_from(view, pos)
        try:
            stream = StreamType(code)
        except ValueError:
            if strict:
                raise ProtocolError(f"unknown stream type {code} at offset {pos}") from None
            stream = StreamType.STDOUT

        payload_start = pos + HEADER_SIZE
        if size == 0:
            pos = payload_start
            continue

        payload_end = payload_start + size
        if payload_end > end:
            if strict:
                raise ProtocolError(
                    f"frame at offset {pos} declares {size} bytes, "
                    f"only {end - payload_start} available"
                )
            logger.debug(
                "Dropping truncated frame at offset %d (%d of %d bytes)",
                pos, end - payload_start, size,
            )
            return frames

        frames.append(LogFrame(stream, bytes(view[payload_start:payload_end])))
        pos = payload_end

    if strict and pos != end:
        raise ProtocolError(f"{end - pos} trailing bytes do not form a frame header")
    return frames


def text(buffer: bytes, include_stderr: bool = False) -> str:
    """Concatenate the stdout (and optionally stderr) text of ``buffer``.

    Payloads that are not valid UTF-8 are skipped.
    """
    wanted = {StreamType.STDOUT}
    if include_stderr:
        wanted.add(StreamType.STDERR)

    parts = []
    for frame in decode(buffer):
        if frame.stream not in wanted:
            continue
        decoded = frame.text
        if decoded is None:
            logger.debug("Skipping %d-byte %s frame that is not UTF-8", len(frame.payload), frame.stream.name)
            continue
        parts.append(decoded)
    return "".join(parts)
