# cogs/prestigereset.py — Moderator: wipe a player's prestige record by ID

import discord
from discord.ext import commands
from discord import app_commands


class PrestigeReset(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="prestigereset", description="Moderator: Reset a player's prestige level.")
    @app_commands.describe(player_id="Discord user ID (or mention) of the player to reset")
    async def prestigereset(self, interaction: discord.Interaction, player_id: str):
        print(f"📥 [/prestigereset] Called by {interaction.user} ({interaction.user.id}) for {player_id!r}")
        await interaction.response.defer(ephemeral=True, thinking=True)

        service = getattr(self.bot, "prestige", None)
        if service is None:
            await interaction.followup.send("❌ Prestige system is not loaded.", ephemeral=True)
            return

        self.bot.prestige_notifier.bind(interaction.user.id, interaction)
        try:
            await service.admin_reset(interaction.user.id, player_id)
        except Exception as e:
            print(f"❌ [/prestigereset] Reset failed: {e}")
            await interaction.followup.send("❌ Reset failed. Check logs for details.", ephemeral=True)


async def setup(bot):
    await bot.add_cog(PrestigeReset(bot))
