"""A logger with the method set that gRPC's logging interfaces expect, backed by a Core."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from zaplite.core import Core, Entry, Level

GRPC_LVL_INFO = 0
GRPC_LVL_WARN = 1
GRPC_LVL_ERROR = 2
GRPC_LVL_FATAL = 3

_GRPC_TO_LEVEL: dict[int, Level] = {
    GRPC_LVL_INFO: Level.INFO,
    GRPC_LVL_WARN: Level.WARN,
    GRPC_LVL_ERROR: Level.ERROR,
    GRPC_LVL_FATAL: Level.FATAL,
}

Option = Callable[["GrpcLogger"], None]


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sprint(*args: Any) -> str:
    """Join ``args``, putting a space between two operands only when neither is a string."""
    parts: list[str] = []
    prev_is_string = False
    for position, arg in enumerate(args):
        is_string = isinstance(arg, str)
        if position > 0 and not is_string and not prev_is_string:
            parts.append(" ")
        parts.append(_format_value(arg))
        prev_is_string = is_string
    return "".join(parts)


def sprintln(*args: Any) -> str:
    """Join ``args`` with single spaces, without a trailing newline."""
    return " ".join(_format_value(arg) for arg in args)


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    if not args:
        return fmt
    if fmt == "":
        return sprint(*args)
    return fmt % args


@dataclass
class _Printer:
    """Print, Printf and Println at one level."""

    logger: GrpcLogger
    level: Level

    def print(self, *args: Any) -> None:
        self.logger._log(self.level, lambda: sprint(*args))

    def printf(self, fmt: str, *args: Any) -> None:
        self.logger._log(self.level, lambda: _sprintf(fmt, args))

    def println(self, *args: Any) -> None:
        if self.logger._core.enabled(self.level):
            self.logger._log(self.level, lambda: sprintln(*args))


def with_debug() -> Option:
    """Make print, printf and println log at debug level instead of info."""

    def apply(logger: GrpcLogger) -> None:
        logger._print = _Printer(logger, Level.DEBUG)

    return apply


def _with_warn() -> Option:
    """Redirect the fatal methods to warn level, so they do not exit."""

    def apply(logger: GrpcLogger) -> None:
        logger._fatal = _Printer(logger, Level.WARN)

    return apply


class GrpcLogger:
    """Adapts a Core to gRPC's logger interfaces."""

    def __init__(self, core: Core, *options: Option) -> None:
        self._core = core
        self._print = _Printer(self, Level.INFO)
        self._fatal = _Printer(self, Level.FATAL)
        for option in options:
            option(self)

    def _log(self, level: Level, render: Callable[[], str]) -> None:
        if level < Level.DPANIC and not self._core.enabled(level):
            return
        entry = Entry(level=level, message=render(), time=datetime.now(timezone.utc))
        checked = self._core.check(entry, None)
        if checked is not None:
            checked.write()
        if level == Level.FATAL:
            raise SystemExit(1)

    def _logln(self, level: Level, args: tuple[Any, ...]) -> None:
        if self._core.enabled(level):
            self._log(level, lambda: sprintln(*args))

    def print(self, *args: Any) -> None:
        self._print.print(*args)

    def printf(self, fmt: str, *args: Any) -> None:
        self._print.printf(fmt, *args)

    def println(self, *args: Any) -> None:
        self._print.println(*args)

    def info(self, *args: Any) -> None:
        self._log(Level.INFO, lambda: sprint(*args))

    def infoln(self, *args: Any) -> None:
        self._logln(Level.INFO, args)

    def infof(self, fmt: str, *args: Any) -> None:
        self._log(Level.INFO, lambda: _sprintf(fmt, args))

    def warning(self, *args: Any) -> None:
        self._log(Level.WARN, lambda: sprint(*args))

    def warningln(self, *args: Any) -> None:
        self._logln(Level.WARN, args)

    def warningf(self, fmt: str, *args: Any) -> None:
        self._log(Level.WARN, lambda: _sprintf(fmt, args))

    def error(self, *args: Any) -> None:
        self._log(Level.ERROR, lambda: sprint(*args))

    def errorln(self, *args: Any) -> None:
        self._logln(Level.ERROR, args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._log(Level.ERROR, lambda: _sprintf(fmt, args))

    def fatal(self, *args: Any) -> None:
        self._fatal.print(*args)

    def fatalln(self, *args: Any) -> None:
        self._fatal.println(*args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self._fatal.printf(fmt, *args)

    def v(self, level: int) -> bool:
        """Report whether the gRPC verbosity ``level`` is enabled."""
        return self._core.enabled(_GRPC_TO_LEVEL.get(level, Level.INFO))