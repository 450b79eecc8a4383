"""A write syncer that forwards log output to a test's log."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class LogTarget(ABC):
    """The part of a test object that log output is sent to."""

    @abstractmethod
    def logf(self, fmt: str, *args: Any) -> None:
        """Log a formatted message without failing the test."""

    @abstractmethod
    def fail(self) -> None:
        """Mark the test as failed."""


@dataclass(frozen=True)
class TargetWriter:
    """Writes each chunk of output as one message to a LogTarget."""

    target: LogTarget
    mark_failed: bool = False

    def with_mark_failed(self, value: bool) -> TargetWriter:
        """Return a copy that marks the test failed on every write when ``value`` is true."""
        return dataclasses.replace(self, mark_failed=value)

    def write(self, data: bytes) -> int:
        """Log ``data`` without its trailing newlines; return the full length."""
        raw = bytes(data)
        text = raw.rstrip(b"\n").decode("utf-8", errors="replace")
        self.target.logf("%s", text)
        if self.mark_failed:
            self.target.fail()
        return len(raw)

    def sync(self) -> None:
        return None