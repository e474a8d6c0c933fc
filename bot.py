# bot.py — Blueprint Prestige bot: config, cog loader, slash sync, storage shutdown

import discord
from discord.ext import commands
import json, os, asyncio

from utils import storageClient

print("🟡 Booting Prestige Bot...")

# ── Load config ──────────────────────────────────────────────────────────────
def load_config(path="config.json"):
    try:
        with open(path, "r") as f:
            config = json.load(f)
        print("✅ Config loaded.")
    except Exception as e:
        print(f"❌ Failed to load {path}: {e}")
        config = {}

    config["token"]    = os.getenv("token", config.get("token"))
    config["guild_id"] = os.getenv("guild_id", config.get("guild_id"))
    config.setdefault("prestige", {})
    return config

# ── Discord bot setup ────────────────────────────────────────────────────────
def create_bot(config):
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True

    bot = commands.Bot(command_prefix="/", intents=intents)
    bot.config = config
    guild_obj = discord.Object(id=int(config.get("guild_id") or 0))

    @bot.event
    async def setup_hook():
        print("🧩 Loading cogs from /cogs…")
        for fn in sorted(os.listdir("./cogs")):
            if fn.endswith(".py") and fn != "__init__.py":
                path = f"cogs.{fn[:-3]}"
                try:
                    await bot.load_extension(path)
                    print(f"   ✔️  {path}")
                except Exception as exc:
                    print(f"   ❌ {path} -> {exc}")

    @bot.event
    async def on_ready():
        print(f"✅ Bot connected as {bot.user}.")
        bot.tree.copy_global_to(guild=guild_obj)
        try:
            synced = await bot.tree.sync(guild=guild_obj)
            print(f"✅ Synced {len(synced)} slash commands to guild {guild_obj.id}")
        except Exception as exc:
            print(f"❌ Slash-sync error: {exc}")

    # ── Log every slash invocation ───────────────────────────────────────────
    @bot.listen("on_interaction")
    async def _log(inter):
        if inter.type == discord.InteractionType.application_command:
            print(f"🟢 /{inter.data.get('name')} by {inter.user} ({inter.user.id})")

    return bot

# ── Run bot ──────────────────────────────────────────────────────────────────
async def main():
    config = load_config()
    if not config.get("token"):
        raise RuntimeError("❌ DISCORD TOKEN missing – set env var `token`")

    bot = create_bot(config)
    print("🚀 Starting bot…")
    try:
        async with bot:
            await bot.start(config["token"])
    finally:
        # cog_unload has flushed prestige levels by now; drop the HTTP session last
        try:
            await storageClient.close_session()
        except Exception as e:
            print(f"⚠️ Failed to close shared HTTP session: {e}")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as err:
        print(f"💥 Fatal crash: {err}")
