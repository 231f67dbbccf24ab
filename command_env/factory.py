"""
Canonical Environment constructors.
Path: command_env/factory.py

for_process binds the real process, for_testing builds a hermetic in-memory
environment and for_null builds one whose every operation is a no-op.
"""

import random
import sys
from typing import Optional, Tuple

import structlog

from command_env.capabilities import FileSystemProtocol, RandomnessProtocol, StreamProtocol
from command_env.config import EnvironmentSettings
from command_env.environment import KIND_CLI, KIND_TESTING, KIND_VARIABLE, Environment
from command_env.filesystems import MemoryFileSystem, OsFileSystem
from command_env.null_device import NullDevice
from command_env.snapshot import ProcessSnapshot
from command_env.streams import BufferStream

logger = structlog.get_logger()

Streams = Tuple[StreamProtocol, StreamProtocol, StreamProtocol]


def _binary(stream):
    return getattr(stream, "buffer", stream)


def process_streams() -> Streams:
    """Binary layers of the process stdin, stdout and stderr"""
    return _binary(sys.stdin), _binary(sys.stdout), _binary(sys.stderr)


def assemble_process_environment(snapshot: ProcessSnapshot,
                                 streams: Streams,
                                 filesystem: FileSystemProtocol,
                                 settings: Optional[EnvironmentSettings] = None) -> Environment:
    """
    Build a process-bound Environment from captured process state.

    Touches no global state; everything comes from the arguments.

    Args:
        snapshot: Environment entries, argument vector and clock reading
        streams: Input, output and error streams, in that order
        filesystem: Filesystem to bind
        settings: Optional settings, defaults used when omitted

    Returns:
        Environment marked with the "cli" kind

    Raises:
        MalformedEnvironmentEntry: If an environment entry lacks '='
    """
    settings = settings or EnvironmentSettings()
    variables = snapshot.variables()
    # The marker reflects the environment kind, not any inherited value.
    variables[KIND_VARIABLE] = KIND_CLI

    input_stream, output_stream, error_stream = streams
    environment = Environment(
        input_stream=input_stream,
        output_stream=output_stream,
        error_stream=error_stream,
        randomness=random.Random(snapshot.clock_ns),
        filesystem=filesystem,
        variables=variables,
        arguments=list(snapshot.argv),
        chunk_size=settings.drain_chunk_size
    )
    logger.debug("factory.process.assembled",
                argument_count=len(environment.arguments),
                variable_count=len(variables))
    return environment


def for_process(base_dir: Optional[str] = None,
                snapshot: Optional[ProcessSnapshot] = None,
                settings: Optional[EnvironmentSettings] = None) -> Environment:
    """
    Environment bound to the running process.

    Streams are the real standard streams, the filesystem is the OS one,
    randomness is seeded from the wall clock and the variable table is the
    process environment. Each call re-reads process state.

    Args:
        base_dir: Root for relative filesystem paths, overrides settings.base_dir
        snapshot: Process state to use instead of capturing the current one
        settings: Optional settings, defaults used when omitted
    """
    settings = settings or EnvironmentSettings()
    snapshot = snapshot or ProcessSnapshot.capture()
    filesystem = OsFileSystem(base_dir or settings.base_dir)

    environment = assemble_process_environment(snapshot, process_streams(), filesystem, settings)
    logger.info("environment.created", kind=KIND_CLI,
               argument_count=len(environment.arguments),
               variable_count=len(environment.variables),
               base_dir=str(filesystem.base_dir) if filesystem.base_dir else None)
    return environment


def for_testing(randomness: Optional[RandomnessProtocol] = None) -> Environment:
    """
    Hermetic Environment for tests.

    Streams are empty in-memory buffers and the filesystem is a fresh
    MemoryFileSystem, so separate calls never share state. Pass a seeded
    source such as random.Random(42) for deterministic randomness, or None
    when the code under test never draws random numbers.
    """
    environment = Environment(
        input_stream=BufferStream(),
        output_stream=BufferStream(),
        error_stream=BufferStream(),
        randomness=randomness,
        filesystem=MemoryFileSystem(),
        variables={KIND_VARIABLE: KIND_TESTING},
        arguments=[]
    )
    logger.debug("environment.created", kind=KIND_TESTING, randomness=randomness is not None)
    return environment


def for_null() -> Environment:
    """
    Environment whose streams and filesystem discard everything.

    Meant for benchmarking command code paths without I/O cost. No kind
    variable is set and randomness is None.
    """
    return Environment(
        input_stream=NullDevice(),
        output_stream=NullDevice(),
        error_stream=NullDevice(),
        randomness=None,
        filesystem=NullDevice(),
        variables={},
        arguments=[]
    )
