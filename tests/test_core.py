import io

import pytest

from zaplite.core import (
    CheckedEntry,
    Core,
    Entry,
    Field,
    Level,
    MultiCore,
    NopCore,
    field,
    namespace,
    new_tee,
)
from zaplite.writesyncer import MultiError


class Recorder(Core):
    """An in-memory core used to observe what a tee delivers."""

    def __init__(self, level, logs=None, context=()):
        self.level = level
        self.logs = [] if logs is None else logs
        self.context = list(context)
        self.sync_error = None
        self.write_error = None

    def with_fields(self, fields):
        child = Recorder(self.level, self.logs, self.context + list(fields))
        return child

    def enabled(self, level):
        return self.level.enabled(level)

    def write(self, entry, fields):
        if self.write_error is not None:
            raise self.write_error
        self.logs.append((entry, self.context + list(fields or [])))

    def sync(self):
        if self.sync_error is not None:
            raise self.sync_error


def make_tee():
    debug = Recorder(Level.DEBUG)
    warn = Recorder(Level.WARN)
    return new_tee(debug, warn), debug.logs, warn.logs


def test_level_enabled_and_str():
    assert Level.WARN.enabled(Level.ERROR)
    assert Level.WARN.enabled(Level.WARN)
    assert not Level.WARN.enabled(Level.INFO)
    assert str(Level.DPANIC) == "dpanic"
    assert str(Level.INFO) == "info"


def test_field_constructors():
    assert field("k", 42) == Field("k", 42)
    assert namespace("ns") == Field("ns", is_namespace=True)
    assert field("k", 1) != field("k", 2)


def test_tee_one_input_unchanged():
    obs = Recorder(Level.DEBUG)
    assert new_tee(obs) is obs


def test_tee_no_input_is_nop():
    assert new_tee() == NopCore()


def test_tee_check():
    tee, debug_logs, warn_logs = make_tee()
    debug_entry = Entry(level=Level.DEBUG, message="log-at-debug")
    info_entry = Entry(level=Level.INFO, message="log-at-info")
    warn_entry = Entry(level=Level.WARN, message="log-at-warn")
    error_entry = Entry(level=Level.ERROR, message="log-at-error")
    for ent in (debug_entry, info_entry, warn_entry, error_entry):
        ce = tee.check(ent, None)
        if ce is not None:
            ce.write()

    assert debug_logs == [
        (debug_entry, []),
        (info_entry, []),
        (warn_entry, []),
        (error_entry, []),
    ]
    assert warn_logs == [(warn_entry, []), (error_entry, [])]


def test_tee_write_ignores_levels():
    tee, debug_logs, warn_logs = make_tee()
    debug_entry = Entry(level=Level.DEBUG, message="log-at-debug")
    warn_entry = Entry(level=Level.WARN, message="log-at-warn")
    for ent in (debug_entry, warn_entry):
        tee.write(ent, None)
    for logs in (debug_logs, warn_logs):
        assert logs == [(debug_entry, []), (warn_entry, [])]


def test_tee_with():
    tee, debug_logs, warn_logs = make_tee()
    f = field("k", 42)
    tee = tee.with_fields([f])
    assert isinstance(tee, MultiCore)
    ent = Entry(level=Level.WARN, message="log-at-warn")
    ce = tee.check(ent, None)
    ce.write()
    for logs in (debug_logs, warn_logs):
        assert logs == [(ent, [f])]


@pytest.mark.parametrize(
    "level, enabled",
    [
        (Level.DEBUG, False),
        (Level.INFO, True),
        (Level.WARN, True),
        (Level.ERROR, True),
        (Level.DPANIC, True),
        (Level.PANIC, True),
        (Level.FATAL, True),
    ],
)
def test_tee_enabled(level, enabled):
    tee = new_tee(Recorder(Level.INFO), Recorder(Level.WARN))
    assert tee.enabled(level) is enabled


def test_tee_sync():
    tee = new_tee(Recorder(Level.INFO), Recorder(Level.WARN))
    assert tee.sync() is None

    failing = Recorder(Level.DEBUG)
    err = OSError("failed")
    failing.sync_error = err
    tee = new_tee(tee, failing)
    with pytest.raises(OSError) as excinfo:
        tee.sync()
    assert excinfo.value is err


def test_tee_write_attempts_all_and_combines_errors():
    a, b, c = Recorder(Level.DEBUG), Recorder(Level.DEBUG), Recorder(Level.DEBUG)
    a.write_error = OSError("a broke")
    c.write_error = OSError("c broke")
    tee = new_tee(a, b, c)
    ent = Entry(level=Level.INFO, message="m")
    with pytest.raises(MultiError) as excinfo:
        tee.write(ent, [])
    assert [str(e) for e in excinfo.value.errors] == ["a broke", "c broke"]
    assert b.logs == [(ent, [])]


def test_nop_core():
    nop = NopCore()
    ent = Entry(level=Level.FATAL, message="x")
    assert nop.check(ent, None) is None
    assert nop.enabled(Level.FATAL) is False
    assert nop.with_fields([field("a", 1)]) is nop


def test_checked_entry_write_error_goes_to_error_output():
    core = Recorder(Level.DEBUG)
    core.write_error = OSError("boom")
    out = io.BytesIO()

    class Out:
        def write(self, data):
            return out.write(data)

        def sync(self):
            return None

    ce = CheckedEntry(error_output=Out())
    ce.add_core(Entry(message="m"), core)
    assert ce.cores == [core]
    assert ce.entry == Entry(message="m")
    ce.write()
    written = out.getvalue()
    assert b"write error: boom" in written
    assert core.logs == []


def test_checked_entry_write_error_raised_without_output():
    core = Recorder(Level.DEBUG)
    core.write_error = OSError("boom")
    ce = core.check(Entry(message="m"), None)
    with pytest.raises(OSError, match="boom"):
        ce.write()


def test_checked_entry_reuse_rejected():
    core = Recorder(Level.DEBUG)
    ce = core.check(Entry(message="once"), None)
    ce.write(field("i", 1))
    with pytest.raises(RuntimeError, match="re-use"):
        ce.write()
    assert core.logs == [(Entry(message="once"), [field("i", 1)])]


def test_check_skips_disabled_core():
    core = Recorder(Level.ERROR)
    assert core.check(Entry(level=Level.INFO), None) is None
    ce = core.check(Entry(level=Level.ERROR, message="e"), None)
    assert ce.cores == [core]
    assert ce.entry == Entry(level=Level.ERROR, message="e")