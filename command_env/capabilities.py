"""
Capability contracts consumed by the execution environment.
Path: command_env/capabilities.py

Command logic only ever talks to these protocols. Process-bound, in-memory
and null implementations all satisfy them without sharing a base class.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class FileInfo:
    """Metadata describing a file or directory"""
    name: str
    size: int
    mode: int
    mtime: datetime
    is_dir: bool = False


@runtime_checkable
class StreamProtocol(Protocol):
    """Byte stream that can be both read from and written to"""

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size bytes, or everything available when size is negative.

        Returns:
            The bytes read; an empty bytes object when nothing is available
        """
        ...

    def write(self, data: bytes) -> int:
        """
        Write data to the stream.

        Returns:
            Number of bytes accepted
        """
        ...


@runtime_checkable
class WritableFileProtocol(Protocol):
    """File handle returned by FileSystemProtocol.open_file"""

    def read(self, size: int = -1) -> bytes: ...

    def write(self, data: bytes) -> int: ...

    def seek(self, offset: int, whence: int = 0) -> int: ...

    def close(self) -> None: ...

    def __enter__(self) -> "WritableFileProtocol": ...

    def __exit__(self, exc_type, exc_value, traceback) -> None: ...


@runtime_checkable
class FileSystemProtocol(Protocol):
    """
    Writable filesystem capability.

    Real implementations raise OSError subclasses on failure. The Optional
    return types exist for the null adapter, which answers None everywhere.
    """

    def open(self, path: str) -> Optional[BinaryIO]:
        """Open a file for binary reading"""
        ...

    def read_dir(self, path: str) -> Optional[List[FileInfo]]:
        """List a directory, sorted by entry name"""
        ...

    def read_file(self, path: str) -> Optional[bytes]:
        """Return the whole content of a file"""
        ...

    def stat(self, path: str) -> Optional[FileInfo]:
        """Describe a file or directory"""
        ...

    def open_file(self, path: str, flags: int, mode: int) -> Optional[WritableFileProtocol]:
        """
        Open a file with os.O_* flags.

        Args:
            path: File path
            flags: Bitwise OR of os.O_* constants
            mode: Permission bits used when the file is created
        """
        ...

    def remove(self, path: str) -> None:
        """Remove a file or an empty directory"""
        ...

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        """Create or truncate a file and write data to it"""
        ...


@runtime_checkable
class RandomnessProtocol(Protocol):
    """Seeded randomness source; random.Random satisfies it"""

    def random(self) -> float: ...

    def getrandbits(self, k: int) -> int: ...


def int63(source: RandomnessProtocol) -> int:
    """Return a non-negative 63-bit integer drawn from source"""
    return source.getrandbits(63)
