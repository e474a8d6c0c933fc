import copy

import pytest

from conftest import run
import utils.blueprintCatalog as catalog_module
import utils.fileIO as file_io_module
from utils.blueprintCatalog import BlueprintCatalog, clean_blueprint_name
from utils.prestigeErrors import PersistenceFailure

FILES = {
    "data/item_recipes.json": {
        "ak": {"produces": "rifle.ak"},
        "scrap": {"requirements": ["Scrap"]},
    },
    "data/armor_blueprints.json": {
        "rock": {"produces": "rock", "default": True},
    },
    "data/user_profiles.json": {
        "1": {"blueprints": ["rifle.ak Blueprint", "rock"], "blueprint_rolls_used": [1], "coins": 5},
    },
}


@pytest.fixture
def storage(monkeypatch):
    files = copy.deepcopy(FILES)

    async def fake_load(path):
        return files.get(path)

    async def fake_save(path, data):
        files[path] = data

    monkeypatch.setattr(catalog_module, "load_file", fake_load)
    monkeypatch.setattr(catalog_module, "save_file", fake_save)
    return files


def test_clean_blueprint_name():
    assert clean_blueprint_name("Pistol Blueprint") == "Pistol"
    assert clean_blueprint_name(" rifle.ak ") == "rifle.ak"
    assert clean_blueprint_name(None) == ""


def test_definitions_cover_all_recipe_files(storage):
    definitions = run(BlueprintCatalog().list_craftable_definitions())
    assert [(d.target_item_id, d.is_default) for d in definitions] == [
        ("rifle.ak", False),
        (None, False),
        ("rock", True),
    ]


def test_unlocks_read_from_profile(storage):
    catalog = BlueprintCatalog()
    assert run(catalog.is_unlocked(1, "rifle.ak"))
    assert not run(catalog.is_unlocked(2, "rifle.ak"))
    assert run(catalog.unlocked_items(1)) == {"rifle.ak", "rock"}


def test_reset_clears_blueprints_only(storage):
    run(BlueprintCatalog().reset_unlocks(1))
    profile = storage["data/user_profiles.json"]["1"]
    assert profile["blueprints"] == []
    assert profile["blueprint_rolls_used"] == []
    assert profile["coins"] == 5


def test_reset_without_profile_writes_nothing(storage):
    before = dict(storage["data/user_profiles.json"])
    run(BlueprintCatalog().reset_unlocks(2))
    assert storage["data/user_profiles.json"] == before


def test_file_io_save_raises_when_storage_rejects(monkeypatch):
    async def rejected(path, data, base_url_override=None):
        return False

    monkeypatch.setattr(file_io_module, "remote_save", rejected)
    with pytest.raises(PersistenceFailure):
        run(file_io_module.save_file("data/prestige_levels.json", {}))


def test_file_io_save_wraps_transport_errors(monkeypatch):
    async def broken(path, data, base_url_override=None):
        raise RuntimeError("PERSISTENT_DATA_URL is not set")

    monkeypatch.setattr(file_io_module, "remote_save", broken)
    with pytest.raises(PersistenceFailure):
        run(file_io_module.save_file("data/user_profiles.json", {}))
