# cogs/rank.py — Show a player's prestige level, title and blueprint progress

import discord
from discord.ext import commands
from discord import app_commands

from utils.rankGroups import group_name


class CloseButton(discord.ui.Button):
    def __init__(self):
        super().__init__(label="Close", style=discord.ButtonStyle.secondary)

    async def callback(self, interaction: discord.Interaction):
        try:
            await interaction.response.edit_message(content="❌ Rank view closed", embed=None, view=None)
        except Exception as e:
            print(f"⚠️ [CloseButton] Failed to close ephemeral message: {e}")


class RankView(discord.ui.View):
    def __init__(self):
        super().__init__(timeout=300)
        self.add_item(CloseButton())


class Rank(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="rank", description="View your prestige level and title.")
    @app_commands.describe(user="Player to look up (defaults to you)")
    async def rank(self, itx: discord.Interaction, user: discord.Member = None):
        service = getattr(self.bot, "prestige", None)
        if service is None:
            await itx.response.send_message("❌ Prestige system is not loaded.", ephemeral=True)
            return

        await itx.response.defer(ephemeral=True, thinking=True)
        target = user or itx.user
        level = service.level_of(target.id)
        title = service.title_for(target.id)

        try:
            result = await service.checker.check_eligibility(target.id)
            status = "✅ Ready to prestige" if result.eligible else "🔒 Still learning blueprints"
        except Exception as e:
            print(f"⚠️ [Rank] Eligibility lookup failed for {target.id}: {e}")
            status = "❔ Unavailable"

        emb = discord.Embed(
            title=f"🏅 {target.display_name}'s Prestige",
            color=discord.Colour.from_str(service.config.title_color) if level else 0x88e0ef
        )
        emb.add_field(name="🧬 Prestige Level", value=str(level), inline=True)
        emb.add_field(name="🎖️ Title", value=title or "None", inline=True)
        emb.add_field(name="🏷️ Rank Group", value=group_name(level) if level else "None", inline=True)
        emb.add_field(name="📜 Blueprints", value=status, inline=False)

        await itx.followup.send(embed=emb, view=RankView(), ephemeral=True)


async def setup(bot):
    await bot.add_cog(Rank(bot))
