"""
Tests for the Environment aggregate and stream draining.
Path: tests/test_environment.py
"""

import pytest

from command_env.environment import KIND_VARIABLE, Environment, drain
from command_env.filesystems import MemoryFileSystem
from command_env.streams import BufferStream


class FailingStream:
    """Yields a fixed chunk, then fails every read"""

    def __init__(self, first_chunk: bytes, error: Exception):
        self._chunks = [first_chunk]
        self._error = error

    def read(self, size: int = -1) -> bytes:
        if self._chunks:
            return self._chunks.pop()
        raise self._error

    def write(self, data: bytes) -> int:
        return len(data)


def make_environment(**overrides) -> Environment:
    fields = dict(
        input_stream=BufferStream(),
        output_stream=BufferStream(),
        error_stream=BufferStream(),
        filesystem=MemoryFileSystem(),
        variables={KIND_VARIABLE: "testing", "SECRET_TOKEN": "hunter2"},
        arguments=[]
    )
    fields.update(overrides)
    return Environment(**fields)


def test_drain_returns_written_bytes_once():
    """A drain sees only bytes written since the previous drain"""
    env = make_environment()
    env.output_stream.write(b"first")

    assert env.drain_output() == b"first"
    assert env.drain_output() == b""

    env.output_stream.write(b"second")
    assert env.drain_output() == b"second"


def test_each_stream_drains_independently():
    env = make_environment()
    env.input_stream.write(b"in")
    env.output_stream.write(b"out")
    env.error_stream.write(b"err")

    assert env.drain_error() == b"err"
    assert env.drain_input() == b"in"
    assert env.drain_output() == b"out"


def test_drain_collects_across_chunks():
    stream = BufferStream(b"0123456789")
    assert drain(stream, chunk_size=3) == b"0123456789"


def test_small_chunk_size_is_used_by_environment():
    env = make_environment(chunk_size=2)
    env.error_stream.write(b"abcdefg")
    assert env.drain_error() == b"abcdefg"


def test_drain_suppresses_read_errors():
    """A failing read yields what was read before the failure"""
    stream = FailingStream(b"partial", OSError("device gone"))
    assert drain(stream) == b"partial"

    stream = FailingStream(b"", ValueError("I/O operation on closed file"))
    stream.read()
    assert drain(stream) == b""


def test_drain_on_write_only_file_returns_empty(tmp_path):
    """Write-only handles raise UnsupportedOperation on read, which is suppressed"""
    with open(tmp_path / "out.bin", "wb") as handle:
        handle.write(b"not readable")
        env = make_environment(output_stream=handle)
        assert env.drain_output() == b""


def test_drain_on_closed_stream_returns_empty():
    stream = BufferStream(b"lost")
    stream.close()
    env = make_environment(input_stream=stream)
    assert env.drain_input() == b""


def test_kind_property_reads_reserved_variable():
    assert make_environment().kind == "testing"
    assert make_environment(variables={}).kind is None


def test_field_set_is_fixed():
    env = make_environment()
    with pytest.raises(AttributeError):
        env.extra = "nope"


def test_repr_hides_variable_values():
    text = repr(make_environment())
    assert "testing" in text
    assert "hunter2" not in text
