"""
Captured process state.
Path: command_env/snapshot.py

Process environments are assembled from a ProcessSnapshot rather than from
os.environ, sys.argv and the clock directly, so assembly can be exercised
with synthetic process state.
"""

import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


class MalformedEnvironmentEntry(ValueError):
    """A process environment entry had no '=' separator"""

    def __init__(self, entry: str):
        super().__init__(f"Environment entry has no '=' separator: {entry!r}")
        self.entry = entry


def split_environ_entry(entry: str) -> Tuple[str, str]:
    """
    Split a KEY=VALUE entry at the first '=' only.

    Raises:
        MalformedEnvironmentEntry: If the entry contains no '='
    """
    key, sep, value = entry.partition("=")
    if not sep:
        raise MalformedEnvironmentEntry(entry)
    return key, value


def parse_environ_entries(entries: Iterable[str]) -> Dict[str, str]:
    """Build a variable table from KEY=VALUE entries; later duplicates win"""
    return dict(split_environ_entry(entry) for entry in entries)


@dataclass(frozen=True)
class ProcessSnapshot:
    """Environment entries, argument vector and clock reading of a process"""
    environ: Tuple[str, ...] = ()
    argv: Tuple[str, ...] = ()
    clock_ns: int = 0

    @classmethod
    def capture(cls, environ: Optional[Dict[str, str]] = None,
                argv: Optional[List[str]] = None) -> "ProcessSnapshot":
        """
        Read the current process state.

        Args:
            environ: Mapping to read instead of os.environ
            argv: Argument vector to use instead of sys.argv

        Returns:
            Snapshot holding KEY=VALUE entries, the argument vector and
            the current wall clock in nanoseconds
        """
        source = os.environ if environ is None else environ
        return cls(
            environ=tuple(f"{key}={value}" for key, value in source.items()),
            argv=tuple(sys.argv if argv is None else argv),
            clock_ns=time.time_ns()
        )

    def variables(self) -> Dict[str, str]:
        return parse_environ_entries(self.environ)
