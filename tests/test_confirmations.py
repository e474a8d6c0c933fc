from conftest import FakeClock
from utils.confirmations import ConfirmationTable, OPEN, CANCELLED, CONFIRMED, EXPIRED


def make_table(timeout=30):
    clock = FakeClock()
    return ConfirmationTable(timeout, clock=clock), clock


def test_open_then_get():
    table, clock = make_table()
    session = table.open(1)
    assert session.state == OPEN
    assert session.opened_at == clock.now
    assert table.get_open(1) is session


def test_reopen_replaces_previous_session():
    table, _ = make_table()
    first = table.open(1)
    second = table.open(1)
    assert first.state == CANCELLED
    assert table.get_open(1) is second
    assert len(table) == 1


def test_close_sets_terminal_state_and_forgets():
    table, _ = make_table()
    session = table.open(1)
    assert table.close(1, CONFIRMED) is session
    assert session.state == CONFIRMED
    assert table.get_open(1) is None
    assert table.close(1, CANCELLED) is None


def test_stale_session_is_expired_on_lookup():
    table, clock = make_table(timeout=30)
    session = table.open(1)
    clock.advance(30)
    assert table.get_open(1) is None
    assert session.state == EXPIRED
    assert len(table) == 0


def test_expire_idle_sweeps_only_timed_out():
    table, clock = make_table(timeout=30)
    table.open(1)
    clock.advance(20)
    table.open(2)
    clock.advance(15)

    assert table.expire_idle() == [1]
    assert table.get_open(2) is not None
    assert table.expire_idle() == []


def test_sessions_are_per_player():
    table, _ = make_table()
    table.open(1)
    table.open(2)
    table.close(1, CANCELLED)
    assert table.get_open(2) is not None
