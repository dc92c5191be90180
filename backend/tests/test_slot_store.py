"""
Tests for services/slot_store.py

Per-weekday creation lock: issued on PostgreSQL, skipped elsewhere, taken before the capacity check.
"""
from datetime import date

from weekly_slots.core.constants import CAPACITY_LOCK_NAMESPACE
from weekly_slots.services import slot_service, slot_store


class _Dialect:
    def __init__(self, name):
        self.name = name


class _Bind:
    def __init__(self, name):
        self.dialect = _Dialect(name)


class _RecordingSession:
    """Just enough of a Session to see what lock_day executes."""

    def __init__(self, dialect_name):
        self._bind = _Bind(dialect_name)
        self.executed = []

    def get_bind(self):
        return self._bind

    def execute(self, statement, params=None):
        self.executed.append((str(statement), params))


class TestLockDay:
    def test_postgresql_takes_transaction_advisory_lock(self):
        session = _RecordingSession("postgresql")
        slot_store.lock_day(session, 3)
        assert len(session.executed) == 1
        statement, params = session.executed[0]
        assert "pg_advisory_xact_lock" in statement
        assert params == {"namespace": CAPACITY_LOCK_NAMESPACE, "day": 3}

    def test_other_backends_skip_the_lock(self):
        session = _RecordingSession("sqlite")
        slot_store.lock_day(session, 3)
        assert session.executed == []

    def test_create_locks_the_weekday_before_checking_capacity(self, db, monkeypatch):
        calls = []
        real_check = slot_service.check_capacity

        monkeypatch.setattr(slot_store, "lock_day", lambda session, dow: calls.append(("lock", dow)))

        def recording_check(session, dow, week_start):
            calls.append(("check", dow))
            return real_check(session, dow, week_start)

        monkeypatch.setattr(slot_service, "check_capacity", recording_check)
        slot_service.create_slot(db, day_of_week=2, start_time="09:00", end_time="10:00", today=date(2026, 10, 19))
        assert calls == [("lock", 2), ("check", 2)]
