# utils/rankGroups.py — Prestige level -> rank group / title, exactly one group per player

from utils.prestigeConfig import format_message, GROUP_PRIORITY, DEFAULT_TITLE_FORMAT, DEFAULT_TITLE_COLOR

GROUP_PREFIX = "prestige"


def group_name(level: int) -> str:
    return f"{GROUP_PREFIX}{level}"


class RankGroupManager:
    def __init__(self, permissions, styler=None, title_format=DEFAULT_TITLE_FORMAT, title_color=DEFAULT_TITLE_COLOR):
        self.permissions = permissions
        self.styler = styler  # optional rank/title collaborator
        self.title_format = title_format
        self.title_color = title_color

    def title_for_level(self, level: int) -> str:
        return format_message(self.title_format, {"level": level})

    async def ensure_group(self, level: int) -> str:
        """Creates the group for this level if missing. Existing groups are never touched."""
        name = group_name(level)
        if await self.permissions.group_exists(name):
            return name

        title = self.title_for_level(level)
        await self.permissions.create_group(name, title, 0)
        print(f"🆕 [RankGroups] Created group {name} ({title})")

        if self.styler is not None:
            await self.styler.set_group_field(name, "priority", GROUP_PRIORITY)
            await self.styler.set_group_field(name, "TitleColor", self.title_color)
            await self.styler.set_group_field(name, "title", title)
        return name

    async def add_member(self, player_id, level: int):
        await self.permissions.add_user_to_group(player_id, group_name(level))

    async def remove_member(self, player_id, level: int):
        await self.permissions.remove_user_from_group(player_id, group_name(level))

    async def migrate(self, player_id, new_level: int):
        """Moves the player into the group for new_level and out of the one below it."""
        name = await self.ensure_group(new_level)
        await self.add_member(player_id, new_level)

        if new_level > 1:
            previous = group_name(new_level - 1)
            if await self.permissions.group_exists(previous):
                await self.remove_member(player_id, new_level - 1)
        print(f"🏷️ [RankGroups] {player_id} now in {name}")

    async def clear(self, player_id, level: int):
        """Drops membership of the group for level (admin reset)."""
        if level < 1:
            return
        name = group_name(level)
        if await self.permissions.group_exists(name):
            await self.remove_member(player_id, level)
            print(f"🧽 [RankGroups] Removed {player_id} from {name}")
