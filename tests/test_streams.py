"""
Tests for the in-memory BufferStream.
Path: tests/test_streams.py
"""

import pytest

from command_env.capabilities import StreamProtocol
from command_env.streams import BufferStream


def test_buffer_stream_satisfies_stream_protocol():
    """BufferStream is usable wherever a StreamProtocol is expected"""
    assert isinstance(BufferStream(), StreamProtocol)


def test_reads_consume_from_the_head():
    """Bytes come out in write order and are not replayed"""
    stream = BufferStream()
    assert stream.write(b"hello ") == 6
    stream.write(b"world")

    assert stream.read(5) == b"hello"
    assert stream.read() == b" world"
    assert stream.read() == b""


def test_write_after_partial_read_appends():
    stream = BufferStream(b"abc")
    assert stream.read(1) == b"a"
    stream.write(b"d")
    assert stream.read(-1) == b"bcd"


def test_getvalue_does_not_consume():
    stream = BufferStream()
    stream.write(b"peek")
    assert stream.getvalue() == b"peek"
    assert len(stream) == 4
    assert stream.read() == b"peek"


def test_closed_stream_rejects_io():
    """A closed buffer raises ValueError like a closed file"""
    stream = BufferStream(b"data")
    stream.close()
    assert stream.closed
    with pytest.raises(ValueError):
        stream.read()
    with pytest.raises(ValueError):
        stream.write(b"more")
