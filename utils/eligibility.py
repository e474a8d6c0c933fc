# utils/eligibility.py — Can this player prestige? (all non-default, non-ignored blueprints learned)

from typing import Optional

from utils.blueprintCatalog import clean_blueprint_name


class EligibilityResult:
    __slots__ = ("eligible", "missing_item")

    def __init__(self, eligible: bool, missing_item: Optional[str] = None):
        self.eligible = eligible
        self.missing_item = missing_item

    def __bool__(self):
        return self.eligible

    def __repr__(self):
        return f"EligibilityResult(eligible={self.eligible}, missing_item={self.missing_item!r})"


class EligibilityChecker:
    def __init__(self, catalog, ignored_blueprints=()):
        self.catalog = catalog
        self.ignored = {clean_blueprint_name(name) for name in ignored_blueprints}

    async def check_eligibility(self, player_id) -> EligibilityResult:
        """
        Walks the whole recipe catalog in order and reports the first
        blueprint the player has not learned. Read-only; the prestige flow
        calls it once before showing the confirmation and again on confirm.
        """
        definitions = await self.catalog.list_craftable_definitions()
        unlocked = {clean_blueprint_name(name) for name in await self.catalog.unlocked_items(player_id)}

        for definition in definitions:
            item_id = definition.target_item_id
            if not item_id or definition.is_default:
                continue
            if clean_blueprint_name(item_id) in self.ignored:
                continue
            if clean_blueprint_name(item_id) not in unlocked:
                print(f"⚠️ [Eligibility] Player {player_id} missing blueprint: {item_id}")
                return EligibilityResult(False, item_id)

        return EligibilityResult(True)
