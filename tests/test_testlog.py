from zaplite.core import CheckedEntry, Core, Entry, Level
from zaplite.testlog import LogTarget, TargetWriter
from zaplite.writesyncer import lock, new_multi_write_syncer


class SpyTarget(LogTarget):
    def __init__(self):
        self.messages = []
        self.failed = False

    def logf(self, fmt, *args):
        self.messages.append(fmt % args)

    def fail(self):
        self.failed = True


class FailingCore(Core):
    def with_fields(self, fields):
        return self

    def enabled(self, level):
        return True

    def write(self, entry, fields):
        raise RuntimeError("failed")


def test_write_reports_full_length_and_strips_newlines():
    spy = SpyTarget()
    writer = TargetWriter(spy)
    assert writer.write(b"hello\n\n") == 7
    assert spy.messages == ["hello"]
    assert spy.failed is False


def test_only_trailing_newlines_are_stripped():
    spy = SpyTarget()
    TargetWriter(spy).write(b"a\nb\n")
    assert spy.messages == ["a\nb"]


def test_with_mark_failed_returns_marked_copy():
    spy = SpyTarget()
    plain = TargetWriter(spy)
    marked = plain.with_mark_failed(True)
    assert plain.mark_failed is False
    assert marked.mark_failed is True

    plain.write(b"ok\n")
    assert spy.failed is False
    marked.write(b"bad\n")
    assert spy.failed is True
    assert spy.messages == ["ok", "bad"]


def test_sync_is_noop():
    spy = SpyTarget()
    assert TargetWriter(spy).sync() is None
    assert spy.messages == []


def test_works_through_lock_and_multi_syncer():
    first, second = SpyTarget(), SpyTarget()
    ws = new_multi_write_syncer(lock(TargetWriter(first)), TargetWriter(second))
    assert ws.write(b"x\n") == 2
    ws.sync()
    assert first.messages == ["x"]
    assert second.messages == ["x"]


def test_write_errors_are_logged_and_mark_failed():
    spy = SpyTarget()
    error_output = TargetWriter(spy).with_mark_failed(True)
    checked = FailingCore().check(Entry(Level.INFO, "foo"), CheckedEntry(error_output=error_output))
    checked.write()
    assert len(spy.messages) == 1
    assert "write error: failed" in spy.messages[0]
    assert spy.failed is True