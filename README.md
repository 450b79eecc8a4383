# zaplite

This package provides small building blocks for structured logging:

- level-aware cores
- a tee that passes each entry to several cores
- write syncers that combine and lock output streams
- an in-memory observer for checking log output in tests
- a write syncer that sends output to a test reporter
- a logger with gRPC-style methods

## Installing

```
pip install zaplite
```

To run the test suite:

```
pip install "zaplite[test]"
pytest
```

## Write syncers (`zaplite.writesyncer`)

A write syncer has `write(data) -> int` and `sync()`.

- `add_sync(writer)` returns the writer unchanged if it already has a callable `sync`. Otherwise it wraps the writer so that `sync` does nothing.
- `lock(ws)` wraps a write syncer in a `LockedWriteSyncer`, which guards every write and sync with a mutex. A `LockedWriteSyncer` is returned as it is.
- `new_multi_write_syncer(*syncers)` returns a `MultiWriteSyncer` that copies every write and every sync to each syncer. With a single argument, it returns that argument unchanged.

```python
import io
from zaplite.writesyncer import add_sync, lock, new_multi_write_syncer

first, second = io.BytesIO(), io.BytesIO()
ws = lock(new_multi_write_syncer(add_sync(first), add_sync(second)))
ws.write(b"hello")   # written to both buffers
ws.sync()
```

How `MultiWriteSyncer.write` reports the result:

- It calls every writer, even after one of them fails.
- It returns the smallest non-zero byte count that was reported.
- If exactly one writer failed, that error is raised.
- If several failed, the errors are raised together as a `MultiError`.

`sync` collects errors in the same way.

`combine_errors(errors)` merges a list of errors:

- It drops `None` values.
- It flattens nested `MultiError`s.
- It returns `None`, the single error, or a `MultiError`.

## Cores and tees (`zaplite.core`)

### Levels

`Level` is an `IntEnum`. From lowest to highest it has `DEBUG`, `INFO`, `WARN`, `ERROR`, `DPANIC`, `PANIC` and `FATAL`. `Level.X.enabled(level)` is true when `level >= X`, so a `Level` can serve as a level enabler.

### Entries and fields

`Entry` is a frozen dataclass with these members: `level`, `message`, `time`, `logger_name` and `stack`.

A `Field` is a key-value pair. Build one with `field(key, value)`. `namespace(key)` builds a field that opens a nested scope for the fields after it.

### The `Core` interface

`Core` is the abstract interface, with these methods: `with_fields`, `enabled`, `check`, `write` and `sync`.

- `check` adds the core to a `CheckedEntry` when the entry's level is enabled.
- `CheckedEntry.write(*fields)` then writes to every core that was added.
- Failures are written to `error_output` if one is set, and raised otherwise.
- Writing the same `CheckedEntry` twice is reported as an error.

### Tees

`new_tee(*cores)` returns a `MultiCore` that passes `check`, `write`, `with_fields` and `sync` to every core.

- `enabled` is true if any of the cores is enabled.
- With one core, `new_tee` returns that core unchanged.
- With no cores, it returns a `NopCore`, which logs nothing.

```python
from zaplite.core import Entry, Level, field, new_tee
from zaplite.observer import observe

debug_core, debug_logs = observe(Level.DEBUG)
warn_core, warn_logs = observe(Level.WARN)
tee = new_tee(debug_core, warn_core).with_fields([field("k", 42)])

checked = tee.check(Entry(level=Level.INFO, message="hi"), None)
if checked is not None:
    checked.write()

assert len(debug_logs) == 1
assert len(warn_logs) == 0
```

## Observing logs in tests (`zaplite.observer`)

`observe(enabler)` returns a `ContextObserver` core together with the `ObservedLogs` collection it records into. The enabler can be either of these:

- an object with an `enabled(level)` method, such as a `Level`
- a plain callable that takes a level

The core keeps the context given by `with_fields`. Each entry is recorded as a `LoggedEntry`, which holds the entry plus its full context.

`ObservedLogs` is thread-safe.

- `len()` gives the number of recorded entries.
- `all()` returns a copy of them.
- `take_all()` returns them and empties the collection.
- `all_untimed()` returns them with their timestamps cleared.

These methods each return a new, filtered `ObservedLogs`:

- `filter_message(msg)`
- `filter_message_snippet(snippet)`
- `filter_field(field)`
- `filter_field_key(key)`

`LoggedEntry.context_map()` turns the context into a dict. Later fields overwrite earlier fields with the same key. A namespace field becomes a nested dict.

## Sending output to a test reporter (`zaplite.testlog`)

`LogTarget` is an abstract class with two methods: `logf(fmt, *args)` and `fail()`.

`TargetWriter(target)` is a write syncer. On each write, it does the following:

- It strips trailing newlines from the data and passes the text to `target.logf("%s", text)`.
- If the writer was built with `with_mark_failed(True)`, it also calls `target.fail()`.
- It returns the full length of the data.

Its `sync` does nothing.

## gRPC-style logging (`zaplite.grpclog`)

`GrpcLogger(core, *options)` logs entries through a core. It has these methods:

- `info`, `infoln`, `infof`
- `warning`, `warningln`, `warningf`
- `error`, `errorln`, `errorf`
- `fatal`, `fatalln`, `fatalf`
- `print`, `printf`, `println`
- `v(level)`

How the methods build and log messages:

- `print`-style methods join their arguments with `sprint`. It puts a space between two operands only when neither is a string.
- `*ln` methods use `sprintln`, which joins with single spaces and adds no trailing newline.
- `*f` methods use `%`-formatting.
- The `fatal` methods log at `FATAL` and then raise `SystemExit(1)`.
- By default `print`, `printf` and `println` log at `INFO`. Passing the `with_debug()` option sends them to `DEBUG` instead.
- `v(level)` maps gRPC levels 0–3 to info, warn, error and fatal, and reports whether that level is enabled. Unknown levels are treated as info.

## What this package does not do

The package has no encoders, so it has no JSON or console output format. It does not open files or other output destinations. There is no general-purpose logger front end with named loggers, sampling or caller information. `GrpcLogger` is the only logger built on a core.

No helper builds a complete test logger around `TargetWriter`. To get one, you combine it with a core that you provide.