# cogs/blueprint.py — Admin: Give or remove blueprint unlocks (feeds prestige eligibility)

import discord
from discord.ext import commands
from discord import app_commands
from typing import Literal

from utils.blueprintCatalog import BlueprintCatalog, clean_blueprint_name
from utils.fileIO import load_file, save_file, USER_PROFILES_PATH


class BlueprintManager(commands.Cog):
    def __init__(self, bot):
        self.bot = bot
        self.catalog = BlueprintCatalog()

    async def get_all_blueprints(self):
        definitions = await self.catalog.list_craftable_definitions()
        return sorted({d.target_item_id for d in definitions if d.target_item_id})

    @app_commands.checks.has_permissions(administrator=True)
    @app_commands.command(
        name="blueprint",
        description="Admin: Give or remove blueprints from a player"
    )
    @app_commands.describe(
        action="Give or remove blueprint",
        user="Target player",
        item="Blueprint name from game data"
    )
    async def blueprint(
        self,
        interaction: discord.Interaction,
        action: Literal["give", "remove"],
        user: discord.Member,
        item: str
    ):
        await interaction.response.defer(ephemeral=True)

        item = clean_blueprint_name(item)
        valid_blueprints = await self.get_all_blueprints()
        if item not in valid_blueprints:
            await interaction.followup.send(
                f"❌ Invalid blueprint.\nChoose from: {', '.join(valid_blueprints[:50])}",
                ephemeral=True
            )
            return

        profiles = await load_file(USER_PROFILES_PATH) or {}
        user_id = str(user.id)
        profile = profiles.get(user_id, {"blueprints": []})
        blueprints = [clean_blueprint_name(bp) for bp in profile.get("blueprints", [])]

        if action == "give":
            if item in blueprints:
                await interaction.followup.send(f"⚠️ {user.mention} already has blueprint **{item}**.", ephemeral=True)
                return
            blueprints.append(item)
            reply = f"✅ Blueprint **{item}** unlocked for {user.mention}."
        else:
            if item not in blueprints:
                await interaction.followup.send(f"⚠️ {user.mention} does not have that blueprint.", ephemeral=True)
                return
            blueprints.remove(item)
            reply = f"🗑 Blueprint **{item}** removed from {user.mention}."

        profile["blueprints"] = blueprints
        profiles[user_id] = profile
        try:
            await save_file(USER_PROFILES_PATH, profiles)
        except Exception as e:
            print(f"❌ [blueprint] Save failed for {user_id}: {e}")
            await interaction.followup.send("❌ Could not save the change. Try again later.", ephemeral=True)
            return

        print(f"📜 [blueprint] {interaction.user} {action} {item} -> {user_id}")
        await interaction.followup.send(reply, ephemeral=True)

    @blueprint.autocomplete("item")
    async def autocomplete_item(self, interaction: discord.Interaction, current: str):
        all_items = await self.get_all_blueprints()
        return [
            app_commands.Choice(name=bp, value=bp)
            for bp in all_items if current.lower() in bp.lower()
        ][:25]


async def setup(bot):
    await bot.add_cog(BlueprintManager(bot))
