import pytest

from conftest import run, FlakyStore
from utils.prestigeErrors import PersistenceFailure
from utils.prestigeStore import PrestigeStore, RemotePrestigeStore
import utils.prestigeStore as prestige_store_module


def test_missing_player_is_level_zero():
    store = PrestigeStore()
    assert store.get(123) == 0
    assert 123 not in store


def test_levels_survive_save_and_load():
    store = PrestigeStore()
    run(store.set(1, 3))
    run(store.set(2, 1))
    run(store.save_all())

    store.levels = {}
    run(store.load_all())

    assert store.get(1) == 3
    assert store.get(2) == 1
    assert len(store) == 2


def test_setting_zero_removes_the_record():
    store = PrestigeStore()
    run(store.set(5, 2))
    run(store.set(5, 0))
    assert 5 not in store
    run(store.load_all())
    assert store.get(5) == 0


def test_negative_level_rejected():
    with pytest.raises(ValueError):
        run(PrestigeStore().set(1, -1))


def test_load_drops_non_positive_levels_and_parses_string_keys():
    store = PrestigeStore(initial={"10": 2, "11": 0})
    run(store.load_all())
    assert store.levels == {10: 2}


def test_failed_set_restores_previous_value():
    store = FlakyStore()
    run(store.set(7, 1))
    store.fail_writes = True

    with pytest.raises(PersistenceFailure):
        run(store.set(7, 2))
    assert store.get(7) == 1

    with pytest.raises(PersistenceFailure):
        run(store.set(8, 1))
    assert 8 not in store


def test_remove_reports_missing_record_without_writing():
    store = FlakyStore()
    assert run(store.remove(99)) is False
    assert store.writes == 0


def test_failed_remove_keeps_record():
    store = FlakyStore()
    run(store.set(3, 3))
    store.fail_writes = True
    with pytest.raises(PersistenceFailure):
        run(store.remove(3))
    assert store.get(3) == 3


def test_remote_store_reads_and_writes_through_file_io(monkeypatch):
    saved = {}

    async def fake_load(path):
        return {"42": 4}

    async def fake_save(path, data):
        saved[path] = data

    monkeypatch.setattr(prestige_store_module, "load_file", fake_load)
    monkeypatch.setattr(prestige_store_module, "save_file", fake_save)

    store = RemotePrestigeStore("data/test_levels.json")
    run(store.load_all())
    assert store.get(42) == 4

    run(store.set(43, 1))
    assert saved["data/test_levels.json"] == {"42": 4, "43": 1}


def test_remote_store_starts_empty_when_document_missing(monkeypatch):
    async def fake_load(path):
        return None

    monkeypatch.setattr(prestige_store_module, "load_file", fake_load)
    store = RemotePrestigeStore()
    run(store.load_all())
    assert len(store) == 0
