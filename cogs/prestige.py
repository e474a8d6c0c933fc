# cogs/prestige.py — /prestige with Yes/Cancel confirmation, expiry sweep and Discord notifications

import discord
from discord.ext import commands, tasks
from discord import app_commands
from datetime import datetime, timedelta
import pytz

from utils.adminLogger import log_admin_action
from utils.blueprintCatalog import BlueprintCatalog
from utils.confirmations import ConfirmationTable
from utils.discordGroups import DiscordRoleGroups, DiscordRoleStyler
from utils.eligibility import EligibilityChecker
from utils.prestigeConfig import PrestigeConfig, format_message
from utils.prestigePorts import NotificationPort
from utils.prestigeService import PrestigeService
from utils.prestigeStore import RemotePrestigeStore
from utils.rankGroups import RankGroupManager

INTERACTION_TOKEN_LIFETIME = timedelta(minutes=15)


class PrestigeConfirmView(discord.ui.View):
    def __init__(self, notifier, player_id: int, timeout: int):
        super().__init__(timeout=timeout)
        self.notifier = notifier
        self.player_id = player_id
        self.message = None

    async def interaction_check(self, itx: discord.Interaction) -> bool:
        if itx.user.id != self.player_id:
            await itx.response.send_message("❌ You can’t use another player’s prestige prompt.", ephemeral=True)
            return False
        return True

    @discord.ui.button(label="✅ Yes", style=discord.ButtonStyle.success)
    async def confirm(self, itx: discord.Interaction, _):
        await itx.response.defer()
        self.notifier.bind(self.player_id, itx)
        print(f"🔘 [PrestigeConfirmView] Confirm pressed by {itx.user} ({itx.user.id})")
        try:
            await itx.client.prestige.confirm(self.player_id, itx.user.display_name)
        except Exception as e:
            print(f"❌ [PrestigeConfirmView] Confirm failed: {e}")
            await itx.followup.send("❌ Something went wrong. Please try again.", ephemeral=True)
        self.stop()

    @discord.ui.button(label="❌ Cancel", style=discord.ButtonStyle.danger)
    async def cancel(self, itx: discord.Interaction, _):
        await itx.response.defer()
        print(f"🚫 [PrestigeConfirmView] Cancel pressed by {itx.user} ({itx.user.id})")
        try:
            await itx.client.prestige.cancel(self.player_id)
            await itx.followup.send(self.notifier.config.message("ConfirmCancelled"), ephemeral=True)
        except Exception as e:
            print(f"❌ [PrestigeConfirmView] Cancel failed: {e}")
        self.stop()

    async def on_timeout(self):
        # The session itself is ended by the expiry sweep
        for item in self.children:
            item.disabled = True
        if self.message is None:
            return
        try:
            await self.message.edit(view=self)
        except discord.HTTPException as e:
            # Already removed when the session ended
            print(f"ℹ️ [PrestigeConfirmView] Prompt for {self.player_id} gone before timeout: {e}")


class DiscordNotifier(NotificationPort):
    """
    Delivers prestige messages. Replies go to the player's latest
    interaction as ephemeral follow-ups and fall back to a DM for guild
    members (used for admin-reset notices and expired interactions).
    """

    def __init__(self, bot, config: PrestigeConfig, guild_id: int):
        self.bot = bot
        self.config = config
        self.guild_id = guild_id
        self._interactions = {}
        self._prompts = {}

    def bind(self, player_id: int, itx: discord.Interaction):
        self._interactions[player_id] = itx
        self._prune_interactions()

    def _prune_interactions(self):
        # Follow-up tokens die after 15 minutes; older interactions are useless
        cutoff = datetime.now(pytz.utc) - INTERACTION_TOKEN_LIFETIME
        stale = [pid for pid, itx in self._interactions.items() if itx.created_at < cutoff]
        for pid in stale:
            del self._interactions[pid]

    async def _dm(self, player_id, content=None, **kwargs):
        guild = self.bot.get_guild(self.guild_id)
        member = guild.get_member(int(player_id)) if guild else None
        if member is None:
            print(f"ℹ️ [DiscordNotifier] {player_id} not in guild, skipping DM")
            return None
        try:
            return await member.send(content, **kwargs)
        except discord.HTTPException as e:
            print(f"⚠️ [DiscordNotifier] DM to {player_id} failed: {e}")
            return None

    async def _reply(self, player_id, content, **kwargs):
        itx = self._interactions.get(player_id)
        if itx is not None:
            try:
                return await itx.followup.send(content, ephemeral=True, wait=True, **kwargs)
            except discord.HTTPException as e:
                print(f"⚠️ [DiscordNotifier] Follow-up to {player_id} failed, falling back to DM: {e}")
                self._interactions.pop(player_id, None)
        return await self._dm(player_id, content, **kwargs)

    async def send_to_player(self, player_id, message_key, tokens=None):
        text = format_message(self.config.message(message_key), tokens)
        print(f"💬 [DiscordNotifier] {message_key} -> {player_id}")
        await self._reply(player_id, text)

    async def broadcast(self, message):
        channel = self.bot.get_channel(self.config.broadcast_channel_id)
        if channel is None:
            print(f"⚠️ [DiscordNotifier] Broadcast channel {self.config.broadcast_channel_id} not found")
            return
        emb = discord.Embed(
            title="🧬 Prestige Unlocked!",
            description=message,
            color=discord.Colour.from_str(self.config.title_color),
            timestamp=datetime.now(pytz.utc)
        )
        try:
            await channel.send(embed=emb)
        except discord.HTTPException as e:
            print(f"⚠️ [DiscordNotifier] Broadcast failed: {e}")

    async def show_confirmation(self, player_id):
        view = PrestigeConfirmView(self, player_id, timeout=self.config.session_timeout)
        content = f"{self.config.message('ConfirmPrompt')}\n{self.config.message('ConfirmUsage')}"
        message = await self._reply(player_id, content, view=view)
        if message is not None:
            view.message = message
            self._prompts[player_id] = message

    async def destroy_confirmation(self, player_id):
        message = self._prompts.pop(player_id, None)
        if message is None:
            return
        try:
            await message.delete()
        except discord.HTTPException as e:
            print(f"⚠️ [DiscordNotifier] Could not remove prompt for {player_id}: {e}")


class Prestige(commands.Cog):
    def __init__(self, bot, service: PrestigeService, notifier: DiscordNotifier):
        self.bot = bot
        self.service = service
        self.notifier = notifier

    async def cog_load(self):
        if not self.expire_sessions.is_running():
            self.expire_sessions.start()

    async def cog_unload(self):
        self.expire_sessions.cancel()
        try:
            await self.service.store.save_all()
            print("💾 [Prestige] Saved prestige levels on unload")
        except Exception as e:
            print(f"❌ [Prestige] Final save failed: {e}")

    @tasks.loop(seconds=30)
    async def expire_sessions(self):
        await self.service.expire_idle()

    @app_commands.command(name="prestige", description="Reset all your blueprints to advance a prestige level.")
    async def prestige(self, itx: discord.Interaction):
        print(f"📥 [/prestige] Called by {itx.user} ({itx.user.id})")
        await itx.response.defer(ephemeral=True, thinking=True)
        self.notifier.bind(itx.user.id, itx)
        try:
            await self.service.request_prestige(itx.user.id)
        except Exception as e:
            print(f"❌ [/prestige] Request failed: {e}")
            await itx.followup.send("❌ Something went wrong. Please try again.", ephemeral=True)

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member):
        await self.service.disconnect(member.id)


async def setup(bot):
    config = PrestigeConfig.from_dict(bot.config.get("prestige"))
    guild_id = int(bot.config.get("guild_id") or 0)

    store = RemotePrestigeStore()
    await store.load_all()

    catalog = BlueprintCatalog()
    permissions = DiscordRoleGroups(bot, guild_id, config)
    styler = DiscordRoleStyler(permissions) if bot.config.get("prestige_role_styling", True) else None
    groups = RankGroupManager(permissions, styler, config.title_format, config.title_color)
    notifier = DiscordNotifier(bot, config, guild_id)

    bot.prestige = PrestigeService(
        store=store,
        catalog=catalog,
        checker=EligibilityChecker(catalog, config.ignored_blueprints),
        sessions=ConfirmationTable(config.session_timeout),
        groups=groups,
        notifier=notifier,
        permissions=permissions,
        config=config,
        audit=log_admin_action,
    )
    bot.prestige_notifier = notifier
    await bot.add_cog(Prestige(bot, bot.prestige, notifier))
