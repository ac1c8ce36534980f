"""
Tests for the snooze store and the scalar state stores behind it.
"""

import pytest

from devbase.exit_codes import SnoozeValueError, USAGE_ERROR
from devbase.infra.state_store import FileScalarStore, MemoryScalarStore
from devbase.services.snooze_service import SECONDS_PER_HOUR, SnoozeStore


NOW = 1_760_000_000


def make_store(value=None, now=NOW):
    return SnoozeStore(MemoryScalarStore(value), clock=lambda: now)


class TestSnoozeSet:

    def test_active_after_set(self):
        snooze = make_store()
        snooze.set(1)
        assert snooze.is_active()

    def test_persists_deadline(self):
        store = MemoryScalarStore()
        SnoozeStore(store, clock=lambda: NOW).set(3)
        assert store.read() == str(NOW + 3 * SECONDS_PER_HOUR)

    def test_numeric_string_accepted(self):
        snooze = make_store()
        state = snooze.set("24")
        assert state.until == NOW + 24 * SECONDS_PER_HOUR

    @pytest.mark.parametrize("value", ["abc", "1.5", "", "-2", "\u00b2", 0, -1, "0", True, 2.5])
    def test_rejects_invalid(self, value):
        snooze = make_store()
        with pytest.raises(SnoozeValueError) as exc_info:
            snooze.set(value)
        assert exc_info.value.exit_code == USAGE_ERROR

    def test_overwrites_previous_value(self):
        store = MemoryScalarStore("garbage")
        snooze = SnoozeStore(store, clock=lambda: NOW)
        snooze.set(2)
        assert store.read() == str(NOW + 2 * SECONDS_PER_HOUR)


class TestSnoozeIsActive:

    def test_missing_is_inactive(self):
        assert not make_store(None).is_active()

    def test_past_timestamp_is_inactive(self):
        assert not make_store(str(NOW - 10)).is_active()

    def test_exactly_now_is_inactive(self):
        assert not make_store(str(NOW)).is_active()

    def test_future_timestamp_is_active(self):
        assert make_store(str(NOW + 10)).is_active()

    @pytest.mark.parametrize("value", ["soon", "", "12abc", "-5", "1.5", "  ", "\u00b2", "\u0663"])
    def test_malformed_fails_open(self, value):
        assert not make_store(value).is_active()

    def test_expires_with_clock(self):
        clock = {"now": NOW}
        snooze = SnoozeStore(MemoryScalarStore(), clock=lambda: clock["now"])
        snooze.set(1)
        clock["now"] = NOW + SECONDS_PER_HOUR + 1
        assert not snooze.is_active()


class TestSnoozeClear:

    def test_clear_removes(self):
        snooze = make_store(str(NOW + 100))
        snooze.clear()
        assert not snooze.is_active()
        assert snooze.state() is None

    def test_clear_is_idempotent(self):
        snooze = make_store()
        snooze.clear()
        snooze.clear()
        assert not snooze.is_active()


class TestFileScalarStore:

    def test_missing_file_reads_none(self, tmp_path):
        assert FileScalarStore(tmp_path / "nope").read() is None

    def test_write_creates_parent_and_reads_back(self, tmp_path):
        store = FileScalarStore(tmp_path / "a" / "b" / "update-snooze")
        store.write("123")
        assert store.read() == "123"
        assert (tmp_path / "a" / "b" / "update-snooze").read_text() == "123\n"

    def test_write_leaves_no_temp_files(self, tmp_path):
        store = FileScalarStore(tmp_path / "update-snooze")
        store.write("1")
        store.write("2")
        assert [p.name for p in tmp_path.iterdir()] == ["update-snooze"]

    def test_clear_idempotent(self, tmp_path):
        store = FileScalarStore(tmp_path / "update-snooze")
        store.clear()
        store.write("1")
        store.clear()
        store.clear()
        assert store.read() is None

    def test_snooze_on_file_store(self, tmp_path):
        path = tmp_path / "update-snooze"
        snooze = SnoozeStore(FileScalarStore(path), clock=lambda: NOW)
        snooze.set(1)
        assert snooze.is_active()

        path.write_text(str(NOW - 3600))
        assert not snooze.is_active()

        path.write_text("not a number")
        assert not snooze.is_active()
