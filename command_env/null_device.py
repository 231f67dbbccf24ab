"""
Null-object adapter for benchmarking.
Path: command_env/null_device.py
"""

from typing import Any, BinaryIO, List, Optional

from command_env.capabilities import FileInfo


class NullDevice:
    """
    Satisfies StreamProtocol and FileSystemProtocol with inert answers.

    Writes are discarded and reported as successful. Every lookup returns
    None, which callers cannot tell apart from "not found". Reads return b"",
    so callers looping until end of stream stop after one call.
    """

    __slots__ = ()

    # Stream capability

    def read(self, size: int = -1) -> bytes:
        return b""

    def write(self, data: bytes) -> int:
        return len(data)

    def flush(self) -> None:
        pass

    # Filesystem capability

    def open(self, path: str) -> Optional[BinaryIO]:
        return None

    def read_dir(self, path: str) -> Optional[List[FileInfo]]:
        return None

    def read_file(self, path: str) -> Optional[bytes]:
        return None

    def stat(self, path: str) -> Optional[FileInfo]:
        return None

    def open_file(self, path: str, flags: int, mode: int) -> Optional[Any]:
        return None

    def remove(self, path: str) -> None:
        return None

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        return None

    def __repr__(self) -> str:
        return "NullDevice()"
