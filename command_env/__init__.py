"""
Execution environments for command-style programs.

This package provides the Environment aggregate, the capability protocols it
depends on, and the constructors that bind it to a real process, to an
in-memory test harness or to a null benchmarking stub.
"""

from .capabilities import (FileInfo, FileSystemProtocol, RandomnessProtocol, StreamProtocol,
                           WritableFileProtocol, int63)
from .config import EnvironmentSettings, load_settings
from .environment import KIND_CLI, KIND_TESTING, KIND_VARIABLE, Environment, drain
from .factory import assemble_process_environment, for_null, for_process, for_testing
from .filesystems import MemoryFileSystem, OsFileSystem
from .logging_setup import configure_logging, configure_logging_from_settings
from .null_device import NullDevice
from .snapshot import MalformedEnvironmentEntry, ProcessSnapshot, parse_environ_entries
from .streams import BufferStream

__all__ = [
    'BufferStream', 'Environment', 'EnvironmentSettings', 'FileInfo', 'FileSystemProtocol',
    'KIND_CLI', 'KIND_TESTING', 'KIND_VARIABLE', 'MalformedEnvironmentEntry', 'MemoryFileSystem',
    'NullDevice', 'OsFileSystem', 'ProcessSnapshot', 'RandomnessProtocol', 'StreamProtocol',
    'WritableFileProtocol', 'assemble_process_environment', 'configure_logging',
    'configure_logging_from_settings', 'drain', 'for_null', 'for_process', 'for_testing', 'int63',
    'load_settings', 'parse_environ_entries',
]
