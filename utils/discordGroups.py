# utils/discordGroups.py — Discord roles as prestige permission groups

import discord

from utils.prestigeConfig import PERMISSION_USE
from utils.prestigePorts import PermissionPort, RankTitlePort


class DiscordRoleGroups(PermissionPort):
    """
    Permission collaborator backed by one guild's roles.

    A permission is granted to guild administrators and to members holding
    one of its configured role ids. "use" with no roles configured is open
    to every member. Without a reachable guild every check fails closed and
    the group calls do nothing.
    """

    def __init__(self, bot, guild_id, config):
        self.bot = bot
        self.guild_id = guild_id
        self.config = config
        # create_role does not cache the new role in guild.roles until the gateway event lands
        self._created = {}

    def _guild(self):
        guild = self.bot.get_guild(self.guild_id)
        if guild is None:
            print(f"⚠️ [DiscordRoleGroups] Guild {self.guild_id} not available, rank groups disabled")
        return guild

    def _role(self, guild, name):
        role = discord.utils.get(guild.roles, name=name)
        if role is not None:
            self._created.pop(name, None)
            return role
        return self._created.get(name)

    def find_role(self, name):
        guild = self._guild()
        return self._role(guild, name) if guild else None

    async def has_permission(self, player_id, permission):
        guild = self._guild()
        member = guild.get_member(int(player_id)) if guild else None
        if member is None:
            return False
        if member.guild_permissions.administrator:
            return True

        roles = self.config.permissions.get(permission, [])
        if not roles:
            return permission == PERMISSION_USE
        return any(role.id in roles for role in member.roles)

    async def group_exists(self, name):
        guild = self._guild()
        return bool(guild and self._role(guild, name))

    async def create_group(self, name, title, priority):
        guild = self._guild()
        if guild is None:
            return
        role = await guild.create_role(name=name, hoist=priority > 0, reason=f"Prestige rank {title}")
        self._created[name] = role

    async def add_user_to_group(self, player_id, name):
        guild = self._guild()
        if guild is None:
            return
        member = guild.get_member(int(player_id))
        role = self._role(guild, name)
        if member is None or role is None:
            print(f"⚠️ [DiscordRoleGroups] Cannot add {player_id} to {name}: member or role missing")
            return
        if role not in member.roles:
            await member.add_roles(role, reason="Prestige level up")

    async def remove_user_from_group(self, player_id, name):
        guild = self._guild()
        if guild is None:
            return
        member = guild.get_member(int(player_id))
        role = self._role(guild, name)
        if member is None or role is None:
            return
        if role in member.roles:
            await member.remove_roles(role, reason="Prestige rank changed")


class DiscordRoleStyler(RankTitlePort):
    """
    Rank/title collaborator: hoists and colours prestige roles.

    The "title" field is accepted and deliberately not applied: role names
    stay the group key, and titles render through /rank instead.
    """

    def __init__(self, groups: DiscordRoleGroups):
        self.groups = groups

    async def set_group_field(self, name, field, value):
        role = self.groups.find_role(name)
        if role is None:
            print(f"⚠️ [DiscordRoleStyler] Role {name} not found, skipping {field}")
            return

        if field == "priority":
            await role.edit(hoist=int(value) > 0)
        elif field == "TitleColor":
            await role.edit(colour=discord.Colour.from_str(value))
        elif field == "title":
            print(f"ℹ️ [DiscordRoleStyler] {name} title is {value}")
        else:
            print(f"⚠️ [DiscordRoleStyler] Unknown group field {field!r}")
