"""
Filesystem implementations satisfying FileSystemProtocol.

OsFileSystem is bound by process environments, MemoryFileSystem by testing
environments.
"""

from .memory_fs import MemoryFile, MemoryFileSystem
from .os_fs import OsFileSystem

__all__ = ['MemoryFile', 'MemoryFileSystem', 'OsFileSystem']
