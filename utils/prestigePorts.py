# utils/prestigePorts.py — Collaborator interfaces the prestige core talks to

class NotificationPort:
    """Outbound messages and confirmation UI. Implemented by cogs/prestige.py."""

    async def send_to_player(self, player_id: int, message_key: str, tokens: dict = None):
        raise NotImplementedError

    async def broadcast(self, message: str):
        raise NotImplementedError

    async def show_confirmation(self, player_id: int):
        raise NotImplementedError

    async def destroy_confirmation(self, player_id: int):
        raise NotImplementedError


class PermissionPort:
    """Capability checks and permission groups (Discord roles in production)."""

    async def has_permission(self, player_id: int, permission: str) -> bool:
        raise NotImplementedError

    async def group_exists(self, name: str) -> bool:
        raise NotImplementedError

    async def create_group(self, name: str, title: str, priority: int):
        raise NotImplementedError

    async def add_user_to_group(self, player_id: int, name: str):
        raise NotImplementedError

    async def remove_user_from_group(self, player_id: int, name: str):
        raise NotImplementedError


class RankTitlePort:
    """Optional group styling (priority, title colour, title text)."""

    async def set_group_field(self, name: str, field: str, value: str):
        raise NotImplementedError
