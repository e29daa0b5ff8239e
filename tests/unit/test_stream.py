"""Tests for the multiplexed stream codec."""

import struct

import pytest

from dockhand import stream
from dockhand.errors import ProtocolError
from dockhand.stream import LogFrame, StreamType


def frame_header(code: int, length: int) -> bytes:
    return bytes([code, 0, 0, 0]) + struct.pack(">I", length)


def test_encode_layout():
    assert stream.encode(StreamType.STDERR, b"oops") == b"\x02\x00\x00\x00\x00\x00\x00\x04oops"


def test_encode_accepts_plain_ints():
    assert stream.encode(1, b"a") == stream.encode(StreamType.STDOUT, b"a")


def test_encode_rejects_unknown_stream():
    with pytest.raises(ValueError):
        stream.encode(7, b"a")


@pytest.mark.parametrize("stream_type", list(StreamType))
def test_decode_single_encoded_frame(stream_type):
    payload = b"payload \x00\xff"
    frames = stream.decode(stream.encode(stream_type, payload))
    assert frames == [LogFrame(stream_type, payload)]


def test_decode_keeps_frame_order():
    buffer = stream.encode(StreamType.STDOUT, b"a") + stream.encode(StreamType.STDERR, b"b")
    frames = stream.decode(buffer)
    assert [f.stream for f in frames] == [StreamType.STDOUT, StreamType.STDERR]
    assert [f.payload for f in frames] == [b"a", b"b"]


def test_decode_large_payload_length():
    payload = b"x" * 70000
    frames = stream.decode(stream.encode(StreamType.STDOUT, payload))
    assert len(frames) == 1
    assert frames[0].payload == payload


def test_decode_drops_truncated_trailing_frame():
    buffer = (
        stream.encode(StreamType.STDOUT, b"first")
        + stream.encode(StreamType.STDERR, b"second")
        + frame_header(1, 10)
        + b"abc"
    )
    frames = stream.decode(buffer)
    assert frames == [
        LogFrame(StreamType.STDOUT, b"first"),
        LogFrame(StreamType.STDERR, b"second"),
    ]


def test_decode_skips_zero_length_frame():
    buffer = frame_header(1, 0) + stream.encode(StreamType.STDERR, b"after")
    assert stream.decode(buffer) == [LogFrame(StreamType.STDERR, b"after")]


def test_decode_unknown_stream_type_defaults_to_stdout():
    buffer = frame_header(9, 3) + b"abc"
    assert stream.decode(buffer) == [LogFrame(StreamType.STDOUT, b"abc")]


def test_decode_ignores_short_tail():
    buffer = stream.encode(StreamType.STDOUT, b"ok") + b"\x01\x00\x00"
    assert stream.decode(buffer) == [LogFrame(StreamType.STDOUT, b"ok")]


def test_decode_empty_buffer():
    assert stream.decode(b"") == []


def test_decode_is_pure():
    buffer = stream.encode(StreamType.STDOUT, b"same")
    assert stream.decode(buffer) == stream.decode(buffer)


def test_strict_rejects_unknown_stream_type():
    with pytest.raises(ProtocolError, match="unknown stream type 9"):
        stream.decode(frame_header(9, 3) + b"abc", strict=True)


def test_strict_rejects_truncated_frame():
    with pytest.raises(ProtocolError, match="declares 10 bytes"):
        stream.decode(frame_header(1, 10) + b"abc", strict=True)


def test_strict_rejects_short_tail():
    with pytest.raises(ProtocolError, match="trailing bytes"):
        stream.decode(stream.encode(StreamType.STDOUT, b"ok") + b"\x01", strict=True)


def test_strict_accepts_well_formed_buffer():
    buffer = stream.encode(StreamType.STDOUT, b"a") + frame_header(2, 0)
    assert stream.decode(buffer, strict=True) == [LogFrame(StreamType.STDOUT, b"a")]


def test_text_excludes_stderr_by_default():
    buffer = stream.encode(StreamType.STDOUT, b"hello") + stream.encode(StreamType.STDERR, b"oops")
    assert stream.text(buffer) == "hello"
    assert stream.text(buffer, include_stderr=False) == "hello"


def test_text_interleaves_stderr_when_asked():
    buffer = (
        stream.encode(StreamType.STDOUT, b"one ")
        + stream.encode(StreamType.STDERR, b"two ")
        + stream.encode(StreamType.STDOUT, b"three")
    )
    assert stream.text(buffer, include_stderr=True) == "one two three"


def test_text_never_includes_stdin():
    buffer = stream.encode(StreamType.STDIN, b"typed") + stream.encode(StreamType.STDOUT, b"out")
    assert stream.text(buffer, include_stderr=True) == "out"


def test_text_drops_invalid_utf8_payloads():
    buffer = (
        stream.encode(StreamType.STDOUT, b"good ")
        + stream.encode(StreamType.STDOUT, b"\xff\xfe")
        + stream.encode(StreamType.STDOUT, "café".encode())
    )
    assert stream.text(buffer) == "good café"


def test_frame_text_property():
    assert LogFrame(StreamType.STDOUT, b"hi").text == "hi"
    assert LogFrame(StreamType.STDOUT, b"\xff").text is None
