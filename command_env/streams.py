"""
In-memory byte streams.
Path: command_env/streams.py
"""

from typing import Union


class BufferStream:
    """
    FIFO byte buffer.

    Writes append at the tail and reads consume from the head, so a reader
    only ever sees bytes that were written since its last read. Reads never
    block; an exhausted buffer reads as b"".
    """

    def __init__(self, initial: Union[bytes, bytearray, None] = None):
        self._buffer = bytearray(initial or b"")
        self._closed = False

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        if size is None or size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
            return data

        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def write(self, data: Union[bytes, bytearray, memoryview]) -> int:
        self._check_open()
        self._buffer.extend(data)
        return len(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        """Return unread bytes without consuming them"""
        return bytes(self._buffer)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return f"BufferStream(unread={len(self._buffer)})"

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed BufferStream")
