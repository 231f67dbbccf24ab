"""
Execution environment for command-style programs.
Path: command_env/environment.py

An Environment bundles the streams, filesystem, randomness source, variable
table and argument list a command runs against. Command logic that depends
only on an Environment runs unchanged against a real process, a hermetic
test harness or a null benchmarking stub.
"""

from typing import Dict, List, Optional

import structlog

from command_env.capabilities import FileSystemProtocol, RandomnessProtocol, StreamProtocol
from command_env.config import DEFAULT_DRAIN_CHUNK_SIZE

logger = structlog.get_logger()

KIND_VARIABLE = "COMMAND_ENV_KIND"
KIND_CLI = "cli"
KIND_TESTING = "testing"


def drain(stream: StreamProtocol, chunk_size: int = DEFAULT_DRAIN_CHUNK_SIZE) -> bytes:
    """
    Read everything currently available from a stream.

    Reads stop at the first empty chunk. A failing read ends the drain and
    the bytes gathered so far are returned.
    """
    collected = bytearray()
    while True:
        try:
            chunk = stream.read(chunk_size)
        except (OSError, ValueError) as e:
            logger.debug("environment.drain.read_failed",
                        error=str(e),
                        error_type=type(e).__name__,
                        bytes_read=len(collected))
            break
        if not chunk:
            break
        collected.extend(chunk)
    return bytes(collected)


class Environment:
    """Streams, filesystem, randomness, variables and arguments for a command."""

    __slots__ = ("input_stream", "output_stream", "error_stream", "randomness",
                 "filesystem", "variables", "arguments", "_chunk_size")

    def __init__(self,
                 input_stream: StreamProtocol,
                 output_stream: StreamProtocol,
                 error_stream: StreamProtocol,
                 filesystem: FileSystemProtocol,
                 variables: Dict[str, str],
                 arguments: List[str],
                 randomness: Optional[RandomnessProtocol] = None,
                 chunk_size: int = DEFAULT_DRAIN_CHUNK_SIZE):
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.error_stream = error_stream
        self.randomness = randomness
        self.filesystem = filesystem
        self.variables = variables
        self.arguments = arguments
        self._chunk_size = chunk_size

    @property
    def kind(self) -> Optional[str]:
        """Value of the reserved kind variable, None when it is not set"""
        return self.variables.get(KIND_VARIABLE)

    def drain_output(self) -> bytes:
        return drain(self.output_stream, self._chunk_size)

    def drain_error(self) -> bytes:
        return drain(self.error_stream, self._chunk_size)

    def drain_input(self) -> bytes:
        return drain(self.input_stream, self._chunk_size)

    def __repr__(self) -> str:
        return (f"Environment(kind={self.kind!r}, arguments={len(self.arguments)}, "
                f"variables={len(self.variables)}, randomness={self.randomness is not None})")
