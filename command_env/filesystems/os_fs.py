"""
Real, OS-backed filesystem.
Path: command_env/filesystems/os_fs.py
"""

import os
import stat as stat_module
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import structlog

from command_env.capabilities import FileInfo

logger = structlog.get_logger()


def file_info_from_stat(name: str, st: os.stat_result) -> FileInfo:
    """Convert an os.stat_result into a FileInfo"""
    return FileInfo(
        name=name,
        size=st.st_size,
        mode=stat_module.S_IMODE(st.st_mode),
        mtime=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        is_dir=stat_module.S_ISDIR(st.st_mode)
    )


def fdopen_mode(flags: int) -> str:
    """Pick the os.fdopen mode string matching a set of os.O_* flags"""
    access = flags & (os.O_WRONLY | os.O_RDWR)
    append = bool(flags & os.O_APPEND)
    if access == os.O_RDWR:
        return "a+b" if append else "r+b"
    if access == os.O_WRONLY:
        return "ab" if append else "wb"
    return "rb"


class OsFileSystem:
    """
    Filesystem capability backed by the operating system.

    Relative paths resolve against base_dir when one is given, otherwise
    against the current working directory. Absolute paths are used as is.
    OS errors propagate unchanged.
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir).expanduser() if base_dir else None

    def resolve(self, path: Union[str, Path]) -> str:
        """Map a caller path onto the real filesystem"""
        candidate = Path(path)
        if self.base_dir is not None and not candidate.is_absolute():
            candidate = self.base_dir / candidate
        return str(candidate)

    def open(self, path: str) -> BinaryIO:
        return open(self.resolve(path), "rb")

    def read_dir(self, path: str) -> List[FileInfo]:
        with os.scandir(self.resolve(path)) as entries:
            infos = [file_info_from_stat(entry.name, entry.stat()) for entry in entries]
        return sorted(infos, key=lambda info: info.name)

    def read_file(self, path: str) -> bytes:
        with self.open(path) as f:
            return f.read()

    def stat(self, path: str) -> FileInfo:
        resolved = self.resolve(path)
        name = os.path.basename(os.path.normpath(resolved))
        return file_info_from_stat(name, os.stat(resolved))

    def open_file(self, path: str, flags: int, mode: int = 0o644):
        fd = os.open(self.resolve(path), flags, mode)
        try:
            return os.fdopen(fd, fdopen_mode(flags))
        except Exception:
            os.close(fd)
            raise

    def remove(self, path: str) -> None:
        resolved = self.resolve(path)
        if os.path.isdir(resolved) and not os.path.islink(resolved):
            os.rmdir(resolved)
        else:
            os.remove(resolved)
        logger.debug("os_fs.removed", path=resolved)

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        with self.open_file(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode) as f:
            f.write(data)

    def __repr__(self) -> str:
        return f"OsFileSystem(base_dir={str(self.base_dir) if self.base_dir else None!r})"
