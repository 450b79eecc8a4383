"""Byte sinks that can be flushed, and helpers to combine and guard them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any


class MultiError(Exception):
    """Several errors reported together."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: list[BaseException] = list(errors)
        super().__init__("; ".join(str(err) for err in self.errors))


def combine_errors(errors: Iterable[BaseException | None]) -> BaseException | None:
    """Merge errors into one, skipping ``None``.

    Returns ``None`` when there is no error, the error itself when there is
    exactly one, and a flattened :class:`MultiError` otherwise.
    """
    collected: list[BaseException] = []
    for err in errors:
        if err is None:
            continue
        if isinstance(err, MultiError):
            collected.extend(err.errors)
        else:
            collected.append(err)
    if not collected:
        return None
    if len(collected) == 1:
        return collected[0]
    return MultiError(collected)


class WriteSyncer(ABC):
    """A byte writer that can also flush anything it has buffered."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""

    @abstractmethod
    def sync(self) -> None:
        """Flush buffered data, raising on failure."""


def _is_write_syncer(obj: Any) -> bool:
    return callable(getattr(obj, "write", None)) and callable(getattr(obj, "sync", None))


class _WriterWrapper(WriteSyncer):
    """Gives a plain writer a no-op ``sync``."""

    def __init__(self, writer: Any) -> None:
        self._writer = writer

    def write(self, data: bytes) -> int:
        written = self._writer.write(data)
        return len(data) if written is None else written

    def sync(self) -> None:
        return None


def add_sync(writer: Any) -> Any:
    """Return ``writer`` as a write syncer.

    Objects that already have a ``sync`` method are returned unchanged;
    anything else gets a no-op ``sync``.
    """
    if _is_write_syncer(writer):
        return writer
    return _WriterWrapper(writer)


class LockedWriteSyncer(WriteSyncer):
    """A write syncer guarded by a mutex for concurrent use."""

    def __init__(self, ws: Any) -> None:
        self._ws = ws
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            return self._ws.write(data)

    def sync(self) -> None:
        with self._lock:
            self._ws.sync()


def lock(ws: Any) -> LockedWriteSyncer:
    """Wrap ``ws`` in a mutex, unless it is already locked."""
    if isinstance(ws, LockedWriteSyncer):
        return ws
    return LockedWriteSyncer(ws)


class MultiWriteSyncer(WriteSyncer):
    """Duplicates writes and syncs across several write syncers."""

    def __init__(self, syncers: Iterable[Any]) -> None:
        self._syncers: tuple[Any, ...] = tuple(syncers)

    def write(self, data: bytes) -> int:
        """Write to every syncer; return the smallest count reported.

        All syncers are written even if some fail; failures are raised
        together afterwards.
        """
        errors: list[BaseException] = []
        written = 0
        for ws in self._syncers:
            try:
                n = ws.write(data)
            except Exception as err:  # noqa: BLE001 - collected and re-raised
                errors.append(err)
                continue
            if written == 0 and n != 0:
                written = n
            elif n < written:
                written = n
        err = combine_errors(errors)
        if err is not None:
            raise err
        return written

    def sync(self) -> None:
        errors: list[BaseException] = []
        for ws in self._syncers:
            try:
                ws.sync()
            except Exception as err:  # noqa: BLE001 - collected and re-raised
                errors.append(err)
        err = combine_errors(errors)
        if err is not None:
            raise err


def new_multi_write_syncer(*args: Any) -> Any:
    """Combine write syncers; a single argument is returned unchanged."""
    if len(args) == 1:
        return args[0]
    return MultiWriteSyncer(args)