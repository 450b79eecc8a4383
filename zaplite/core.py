"""Levels, entries, fields and cores, including the tee that fans out to many cores."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field as dc_field
from datetime import datetime
from typing import Any

from zaplite.writesyncer import combine_errors


class Level(enum.IntEnum):
    """Logging priority; higher is more important."""

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5

    def enabled(self, level: Level) -> bool:
        """Report whether ``level`` is at or above this level."""
        return level >= self

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Entry:
    """A log entry, without its structured context."""

    level: Level = Level.INFO
    message: str = ""
    time: datetime | None = None
    logger_name: str = ""
    stack: str = ""


@dataclass(frozen=True)
class Field:
    """A key-value pair of structured context.

    A namespace field opens a nested scope for the fields that follow it.
    """

    key: str
    value: Any = None
    is_namespace: bool = False


def field(key: str, value: Any) -> Field:
    """Build a field holding ``value``."""
    return Field(key, value)


def namespace(key: str) -> Field:
    """Build a field that opens the namespace ``key``."""
    return Field(key, is_namespace=True)


@dataclass
class CheckedEntry:
    """An entry together with the cores that agreed to log it."""

    entry: Entry | None = None
    cores: list[Core] = dc_field(default_factory=list)
    error_output: Any = None
    _written: bool = dc_field(default=False, repr=False, compare=False)

    def add_core(self, entry: Entry, core: Core) -> CheckedEntry:
        """Add ``core`` to the cores that will write this entry."""
        if self.entry is None:
            self.entry = entry
        self.cores.append(core)
        return self

    def write(self, *args: Field) -> None:
        """Write the entry with the fields ``args`` to every added core.

        Every core is attempted. Failures go to ``error_output`` when one is
        set, and are raised otherwise.
        """
        if self._written:
            self._report(RuntimeError(f"unsafe CheckedEntry re-use near entry {self.entry!r}"))
            return
        self._written = True
        fields = list(args)
        errors: list[BaseException] = []
        for core in self.cores:
            try:
                core.write(self.entry, fields)
            except Exception as err:  # noqa: BLE001 - collected and reported
                errors.append(err)
        err = combine_errors(errors)
        if err is not None:
            self._report(err)

    def _report(self, err: BaseException) -> None:
        if self.error_output is None:
            raise err
        when = self.entry.time if self.entry is not None else None
        self.error_output.write(f"{when} write error: {err}\n".encode())
        self.error_output.sync()


class Core(ABC):
    """The minimal logging interface: filter, add context, write, flush."""

    @abstractmethod
    def with_fields(self, fields: Sequence[Field]) -> Core:
        """Return a copy of this core with extra context."""

    @abstractmethod
    def enabled(self, level: Level) -> bool:
        """Report whether entries at ``level`` would be logged."""

    def check(self, entry: Entry, checked: CheckedEntry | None) -> CheckedEntry | None:
        """Add this core to ``checked`` if it would log ``entry``."""
        if not self.enabled(entry.level):
            return checked
        if checked is None:
            checked = CheckedEntry(entry)
        return checked.add_core(entry, self)

    @abstractmethod
    def write(self, entry: Entry, fields: Sequence[Field]) -> None:
        """Write the entry unconditionally, raising on failure."""

    def sync(self) -> None:
        """Flush buffered entries."""
        return None


@dataclass(frozen=True)
class NopCore(Core):
    """A core that logs nothing."""

    def with_fields(self, fields: Sequence[Field]) -> Core:
        return self

    def enabled(self, level: Level) -> bool:
        return False

    def check(self, entry: Entry, checked: CheckedEntry | None) -> CheckedEntry | None:
        return checked

    def write(self, entry: Entry, fields: Sequence[Field]) -> None:
        return None


class MultiCore(Core):
    """Duplicates entries into several underlying cores."""

    def __init__(self, cores: Iterable[Core]) -> None:
        self.cores: tuple[Core, ...] = tuple(cores)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MultiCore) and self.cores == other.cores

    def __hash__(self) -> int:
        return hash(self.cores)

    def __repr__(self) -> str:
        return f"MultiCore({list(self.cores)!r})"

    def with_fields(self, fields: Sequence[Field]) -> Core:
        return MultiCore(core.with_fields(fields) for core in self.cores)

    def enabled(self, level: Level) -> bool:
        return any(core.enabled(level) for core in self.cores)

    def check(self, entry: Entry, checked: CheckedEntry | None) -> CheckedEntry | None:
        for core in self.cores:
            checked = core.check(entry, checked)
        return checked

    def write(self, entry: Entry, fields: Sequence[Field]) -> None:
        self._each(lambda core: core.write(entry, fields))

    def sync(self) -> None:
        self._each(lambda core: core.sync())

    def _each(self, action) -> None:
        errors: list[BaseException] = []
        for core in self.cores:
            try:
                action(core)
            except Exception as err:  # noqa: BLE001 - collected and re-raised
                errors.append(err)
        err = combine_errors(errors)
        if err is not None:
            raise err


def new_tee(*args: Core) -> Core:
    """Combine cores; one core is returned unchanged, none gives a no-op core."""
    if not args:
        return NopCore()
    if len(args) == 1:
        return args[0]
    return MultiCore(args)