"""
Error taxonomy for the monitor loop.

Every failure the loop knows how to survive is one of two kinds. Both end the
current cycle (or the current account's write) and never the process.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "source_unavailable"
    SINK_WRITE_FAILED = "sink_write_failed"


class MonitorError(Exception):
    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class SourceUnavailable(MonitorError):
    """A read (balances or APY) could not be served."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.SOURCE_UNAVAILABLE, message)


class SinkWriteFailed(MonitorError):
    """The growth write to the data store did not go through."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.SINK_WRITE_FAILED, message)
