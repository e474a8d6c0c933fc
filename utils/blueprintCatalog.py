# utils/blueprintCatalog.py — Recipe catalog + per-player blueprint unlocks (profile-backed)

from utils.fileIO import load_file, save_file, USER_PROFILES_PATH

RECIPE_FILES = [
    "data/item_recipes.json",
    "data/armor_blueprints.json",
    "data/explosive_blueprints.json"
]

BLUEPRINT_SUFFIX = " Blueprint"


class BlueprintDefinition:
    __slots__ = ("target_item_id", "is_default")

    def __init__(self, target_item_id, is_default=False):
        self.target_item_id = target_item_id
        self.is_default = is_default

    def __repr__(self):
        return f"BlueprintDefinition({self.target_item_id!r}, is_default={self.is_default})"


def clean_blueprint_name(name: str) -> str:
    """Profiles store either "m249" or "m249 Blueprint"; compare on the bare key."""
    name = (name or "").strip()
    if name.endswith(BLUEPRINT_SUFFIX):
        name = name[: -len(BLUEPRINT_SUFFIX)].strip()
    return name


class BlueprintCatalog:
    """
    Reads recipe definitions from the recipe files and unlock records from
    user_profiles.json. Recipes without a "produces" entry have no target
    item and come back with target_item_id None.
    """

    def __init__(self, recipe_files=None, profiles_path=USER_PROFILES_PATH):
        self.recipe_files = recipe_files or RECIPE_FILES
        self.profiles_path = profiles_path

    async def list_craftable_definitions(self):
        definitions = []
        for path in self.recipe_files:
            data = await load_file(path) or {}
            for entry in data.values():
                produced = entry.get("produces")
                definitions.append(BlueprintDefinition(
                    clean_blueprint_name(produced) if produced else None,
                    bool(entry.get("default", False)),
                ))
        return definitions

    async def unlocked_items(self, player_id) -> set:
        """All blueprints the player has learned, one profile read."""
        profiles = await load_file(self.profiles_path) or {}
        profile = profiles.get(str(player_id)) or {}
        return {clean_blueprint_name(bp) for bp in profile.get("blueprints", [])}

    async def is_unlocked(self, player_id, item_id) -> bool:
        return clean_blueprint_name(item_id) in await self.unlocked_items(player_id)

    async def reset_unlocks(self, player_id):
        profiles = await load_file(self.profiles_path) or {}
        uid = str(player_id)
        profile = profiles.get(uid)
        if not profile:
            print(f"ℹ️ [BlueprintCatalog] No profile for {uid}, nothing to reset")
            return

        profile["blueprints"] = []
        profile["blueprint_rolls_used"] = []
        profiles[uid] = profile
        await save_file(self.profiles_path, profiles)
        print(f"🧹 [BlueprintCatalog] Reset blueprints for {uid}")
