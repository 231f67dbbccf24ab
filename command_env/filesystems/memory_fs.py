"""
Isolated in-memory filesystem for hermetic tests.
Path: command_env/filesystems/memory_fs.py

Every MemoryFileSystem instance owns its own store; two instances never see
each other's files. Paths are POSIX-style and relative to the store root.
"""

import errno
import io
import os
import posixpath
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog

from command_env.capabilities import FileInfo

logger = structlog.get_logger()

DIR_MODE = 0o755


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _os_error(cls, code: int, path: str) -> OSError:
    return cls(code, os.strerror(code), path)


class _Entry:
    """Stored file content and metadata"""

    __slots__ = ("data", "mode", "mtime")

    def __init__(self, data: bytes, mode: int):
        self.data = bytes(data)
        self.mode = mode
        self.mtime = _now()


class MemoryFile(io.BytesIO):
    """
    Handle returned by MemoryFileSystem.open_file.

    Content is committed back to the owning filesystem on flush() and close().
    Once the file is removed or replaced the handle is detached and its
    writes no longer reach the filesystem.
    """

    def __init__(self, fs: "MemoryFileSystem", key: str, entry: "_Entry",
                 readable: bool, writable: bool, append: bool):
        super().__init__(entry.data)
        self._fs = fs
        self._key = key
        self._entry = entry
        self._readable = readable
        self._writable = writable
        self._append = append
        self._dirty = False

    @property
    def name(self) -> str:
        return self._key

    def readable(self) -> bool:
        return self._readable and not self.closed

    def writable(self) -> bool:
        return self._writable and not self.closed

    def read(self, size: Optional[int] = -1) -> bytes:
        if not self._readable:
            raise io.UnsupportedOperation("not readable")
        return super().read(size)

    def write(self, data) -> int:
        if not self._writable:
            raise io.UnsupportedOperation("not writable")
        if self._append:
            self.seek(0, io.SEEK_END)
        written = super().write(data)
        self._dirty = True
        return written

    def truncate(self, size: Optional[int] = None) -> int:
        if not self._writable:
            raise io.UnsupportedOperation("not writable")
        self._dirty = True
        return super().truncate(size)

    def flush(self) -> None:
        super().flush()
        if self._dirty:
            self._fs._commit(self._key, self._entry, self.getvalue())
            self._dirty = False

    def close(self) -> None:
        if not self.closed:
            self.flush()
        super().close()


class MemoryFileSystem:
    """
    Writable filesystem held entirely in memory.

    Directories are created on demand by write_file and open_file(O_CREAT)
    and persist until removed. The root always exists.
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self._files: Dict[str, _Entry] = {}
        self._dirs: Dict[str, datetime] = {"": _now()}
        for path, data in (files or {}).items():
            self.write_file(path, data)

    # Path handling

    @staticmethod
    def normalize(path: str) -> str:
        """
        Turn a caller path into a store key.

        Leading "/" and "./" are ignored and "" or "." is the root. Paths
        that climb above the root are rejected with ValueError.
        """
        stripped = str(path).replace("\\", "/").lstrip("/")
        normalized = posixpath.normpath(stripped) if stripped else "."
        if normalized == ".." or normalized.startswith("../"):
            raise ValueError(f"Path escapes filesystem root: {path}")
        return "" if normalized == "." else normalized

    def _ensure_parents(self, key: str, path: str) -> None:
        parent = posixpath.dirname(key)
        missing = []
        while parent not in self._dirs:
            if parent in self._files:
                raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
            missing.append(parent)
            parent = posixpath.dirname(parent)
        created = _now()
        for directory in missing:
            self._dirs[directory] = created

    def _lookup_file(self, path: str) -> _Entry:
        key = self.normalize(path)
        if key in self._dirs:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        entry = self._files.get(key)
        if entry is None:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        return entry

    def _commit(self, key: str, entry: _Entry, data: bytes) -> None:
        if self._files.get(key) is not entry:
            logger.debug("memory_fs.commit_detached", path=key)
            return
        entry.data = bytes(data)
        entry.mtime = _now()

    # Read side

    def open(self, path: str) -> io.BytesIO:
        return io.BytesIO(self._lookup_file(path).data)

    def read_file(self, path: str) -> bytes:
        return self._lookup_file(path).data

    def stat(self, path: str) -> FileInfo:
        key = self.normalize(path)
        name = posixpath.basename(key) or "."
        if key in self._dirs:
            return FileInfo(name=name, size=0, mode=DIR_MODE, mtime=self._dirs[key], is_dir=True)
        entry = self._files.get(key)
        if entry is None:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        return FileInfo(name=name, size=len(entry.data), mode=entry.mode, mtime=entry.mtime)

    def read_dir(self, path: str) -> List[FileInfo]:
        key = self.normalize(path)
        if key in self._files:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        if key not in self._dirs:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)

        infos = []
        for directory, mtime in self._dirs.items():
            if directory and posixpath.dirname(directory) == key:
                infos.append(FileInfo(name=posixpath.basename(directory), size=0,
                                      mode=DIR_MODE, mtime=mtime, is_dir=True))
        for file_key, entry in self._files.items():
            if posixpath.dirname(file_key) == key:
                infos.append(FileInfo(name=posixpath.basename(file_key), size=len(entry.data),
                                      mode=entry.mode, mtime=entry.mtime))
        return sorted(infos, key=lambda info: info.name)

    # Write side

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        key = self.normalize(path)
        if key in self._dirs:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        self._ensure_parents(key, path)
        entry = self._files.get(key)
        if entry is None:
            self._files[key] = _Entry(data, mode)
        else:
            entry.data = bytes(data)
            entry.mtime = _now()
        logger.debug("memory_fs.write_file", path=key, size=len(data))

    def open_file(self, path: str, flags: int, mode: int = 0o644) -> MemoryFile:
        key = self.normalize(path)
        if key in self._dirs:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)

        access = flags & (os.O_WRONLY | os.O_RDWR)
        readable = access in (os.O_RDONLY, os.O_RDWR)
        writable = access in (os.O_WRONLY, os.O_RDWR)

        entry = self._files.get(key)
        if entry is None:
            if not flags & os.O_CREAT:
                raise _os_error(FileNotFoundError, errno.ENOENT, path)
            self._ensure_parents(key, path)
            entry = _Entry(b"", mode)
            self._files[key] = entry
        elif flags & os.O_CREAT and flags & os.O_EXCL:
            raise _os_error(FileExistsError, errno.EEXIST, path)

        if flags & os.O_TRUNC and writable:
            entry.data = b""
            entry.mtime = _now()

        return MemoryFile(self, key, entry, readable=readable, writable=writable,
                          append=bool(flags & os.O_APPEND))

    def remove(self, path: str) -> None:
        key = self.normalize(path)
        if key in self._files:
            del self._files[key]
        elif key == "":
            raise _os_error(OSError, errno.EBUSY, path)
        elif key in self._dirs:
            prefix = key + "/"
            if any(other.startswith(prefix) for other in list(self._files) + list(self._dirs)):
                raise _os_error(OSError, errno.ENOTEMPTY, path)
            del self._dirs[key]
        else:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        logger.debug("memory_fs.removed", path=key)

    def __repr__(self) -> str:
        return f"MemoryFileSystem(files={len(self._files)}, dirs={len(self._dirs) - 1})"
