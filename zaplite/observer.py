"""A core that keeps logged entries in memory, unencoded, for inspection in tests."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from zaplite.core import CheckedEntry, Core, Entry, Field, Level


@dataclass(frozen=True)
class LoggedEntry:
    """An entry together with all of the context it was logged with."""

    entry: Entry
    context: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", tuple(self.context))

    @property
    def level(self) -> Level:
        return self.entry.level

    @property
    def message(self) -> str:
        return self.entry.message

    @property
    def time(self) -> datetime | None:
        return self.entry.time

    @property
    def logger_name(self) -> str:
        return self.entry.logger_name

    def context_map(self) -> dict[str, Any]:
        """Return the context as a dict; namespace fields become nested dicts."""
        result: dict[str, Any] = {}
        current = result
        for ctx_field in self.context:
            if ctx_field.is_namespace:
                nested: dict[str, Any] = {}
                current[ctx_field.key] = nested
                current = nested
            else:
                current[ctx_field.key] = ctx_field.value
        return result


class ObservedLogs:
    """A thread-safe, ordered collection of observed entries."""

    def __init__(self, logs: Iterable[LoggedEntry] = ()) -> None:
        self._lock = threading.Lock()
        self._logs: list[LoggedEntry] = list(logs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)

    def all(self) -> list[LoggedEntry]:
        """Return a copy of every observed entry."""
        with self._lock:
            return list(self._logs)

    def take_all(self) -> list[LoggedEntry]:
        """Return every observed entry and empty the collection."""
        with self._lock:
            taken, self._logs = self._logs, []
        return taken

    def all_untimed(self) -> list[LoggedEntry]:
        """Return every observed entry with its timestamp cleared."""
        return [
            dataclasses.replace(logged, entry=dataclasses.replace(logged.entry, time=None))
            for logged in self.all()
        ]

    def filter_message(self, msg: str) -> ObservedLogs:
        """Keep entries whose message equals ``msg``."""
        return self._filter(lambda logged: logged.message == msg)

    def filter_message_snippet(self, snippet: str) -> ObservedLogs:
        """Keep entries whose message contains ``snippet``."""
        return self._filter(lambda logged: snippet in logged.message)

    def filter_field(self, field: Field) -> ObservedLogs:
        """Keep entries that carry ``field`` in their context."""
        return self._filter(lambda logged: any(ctx == field for ctx in logged.context))

    def filter_field_key(self, key: str) -> ObservedLogs:
        """Keep entries that carry a field named ``key``."""
        return self._filter(lambda logged: any(ctx.key == key for ctx in logged.context))

    def _filter(self, match: Callable[[LoggedEntry], bool]) -> ObservedLogs:
        with self._lock:
            return ObservedLogs(logged for logged in self._logs if match(logged))

    def _add(self, logged: LoggedEntry) -> None:
        with self._lock:
            self._logs.append(logged)


def _level_check(enabler: Any) -> Callable[[Level], bool]:
    if callable(getattr(enabler, "enabled", None)):
        return enabler.enabled
    if callable(enabler):
        return enabler
    raise TypeError(f"not a level enabler: {enabler!r}")


class ContextObserver(Core):
    """A core that records entries, with their context, into ObservedLogs."""

    def __init__(
        self,
        enabler: Any,
        logs: ObservedLogs,
        context: Sequence[Field] = (),
    ) -> None:
        self._enabler = enabler
        self._is_enabled = _level_check(enabler)
        self.logs = logs
        self.context: tuple[Field, ...] = tuple(context)

    def with_fields(self, fields: Sequence[Field]) -> ContextObserver:
        return ContextObserver(self._enabler, self.logs, self.context + tuple(fields))

    def enabled(self, level: Level) -> bool:
        return bool(self._is_enabled(level))

    def check(self, entry: Entry, checked: CheckedEntry | None) -> CheckedEntry | None:
        if not self.enabled(entry.level):
            return checked
        if checked is None:
            checked = CheckedEntry()
        return checked.add_core(entry, self)

    def write(self, entry: Entry, fields: Sequence[Field]) -> None:
        self.logs._add(LoggedEntry(entry, self.context + tuple(fields)))

    def sync(self) -> None:
        return None


def observe(enabler: Any) -> tuple[ContextObserver, ObservedLogs]:
    """Create a recording core and the collection it records into."""
    logs = ObservedLogs()
    return ContextObserver(enabler, logs), logs