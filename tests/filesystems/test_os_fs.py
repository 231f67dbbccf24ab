"""
Tests for the OS-backed filesystem.
Path: tests/filesystems/test_os_fs.py
"""

import os

import pytest

from command_env.capabilities import FileSystemProtocol
from command_env.filesystems import OsFileSystem
from command_env.filesystems.os_fs import fdopen_mode


@pytest.fixture
def fs(tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "b.txt").write_bytes(b"bee")
    (tmp_path / "data" / "a.txt").write_bytes(b"ay")
    return OsFileSystem(tmp_path)


def test_os_fs_satisfies_protocol(fs):
    assert isinstance(fs, FileSystemProtocol)


def test_relative_paths_resolve_against_base_dir(fs, tmp_path):
    assert fs.resolve("data/a.txt") == str(tmp_path / "data" / "a.txt")
    assert fs.read_file("data/a.txt") == b"ay"


def test_absolute_paths_bypass_base_dir(fs, tmp_path):
    absolute = str(tmp_path / "data" / "b.txt")
    assert fs.resolve(absolute) == absolute
    with fs.open(absolute) as handle:
        assert handle.read() == b"bee"


def test_without_base_dir_paths_are_untouched():
    assert OsFileSystem().resolve("relative/path") == os.path.join("relative", "path")


def test_read_dir_is_sorted(fs):
    entries = fs.read_dir("data")
    assert [entry.name for entry in entries] == ["a.txt", "b.txt"]
    assert entries[0].size == 2
    assert not entries[0].is_dir


def test_stat(fs):
    assert fs.stat("data").is_dir
    info = fs.stat("data/b.txt")
    assert info.name == "b.txt"
    assert info.size == 3


def test_write_file_creates_with_mode(fs, tmp_path):
    fs.write_file("data/new.txt", b"fresh", 0o600)

    assert (tmp_path / "data" / "new.txt").read_bytes() == b"fresh"
    assert fs.stat("data/new.txt").mode & 0o077 == 0


def test_write_file_truncates(fs):
    fs.write_file("data/b.txt", b"x")
    assert fs.read_file("data/b.txt") == b"x"


def test_open_file_append(fs):
    with fs.open_file("data/a.txt", os.O_WRONLY | os.O_APPEND, 0o644) as handle:
        handle.write(b"e")
    assert fs.read_file("data/a.txt") == b"aye"


def test_open_file_exclusive(fs):
    with pytest.raises(FileExistsError):
        fs.open_file("data/a.txt", os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)


def test_remove_file_and_directory(fs):
    fs.remove("data/a.txt")
    fs.remove("data/b.txt")
    fs.remove("data")

    with pytest.raises(FileNotFoundError):
        fs.stat("data")


def test_errors_propagate(fs):
    with pytest.raises(FileNotFoundError):
        fs.read_file("missing.txt")
    with pytest.raises(OSError):
        fs.remove("data")


@pytest.mark.parametrize("flags, expected", [
    (os.O_RDONLY, "rb"),
    (os.O_WRONLY | os.O_CREAT | os.O_TRUNC, "wb"),
    (os.O_WRONLY | os.O_APPEND, "ab"),
    (os.O_RDWR, "r+b"),
    (os.O_RDWR | os.O_APPEND, "a+b"),
])
def test_fdopen_mode(flags, expected):
    assert fdopen_mode(flags) == expected
