# utils/prestigeConfig.py — Prestige settings (defaults + config.json "prestige" section)

DEFAULT_MESSAGES = {
    "NoPermission": "❌ You do not have permission to use this command.",
    "ConfirmUsage": "Press **Yes** to confirm your prestige.",
    "ConfirmPrompt": "⚠️ Are you sure you want to prestige?\nThis will reset all your blueprints!",
    "NotAllBlueprints": "🔒 You haven't learned all blueprints yet.",
    "BlueprintsReset": "🧹 All your blueprints have been reset.",
    "PrestigeUp": "🎉 Congratulations {player}! You are now Prestige Level {level}.",
    "PrestigeReset": "🗑️ Prestige level has been reset for player {player}.",
    "ResetNoRecord": "⚠️ Player {player} does not have a prestige level set.",
    "ResetTargetNotice": "ℹ️ Your prestige level has been reset by an admin.",
    "InvalidTarget": "❌ Invalid player ID: `{player}`.",
    "PrestigeFailed": "❌ Prestige could not be saved. Nothing was reset, please try again later.",
    "ResetFailed": "❌ Could not save the prestige reset for player {player}. Nothing was changed.",
    "ConfirmCancelled": "❌ Prestige cancelled.",
}

DEFAULT_IGNORED_BLUEPRINTS = [
    "discord.trophy",
    "fogmachine",
    "strobelight",
    "kayak",
    "dart.incapacitate",
    "dart.radiation",
    "dart.scatter",
    "dart.wood",
    "boots.frog",
    "draculacape",
    "m249",
]

DEFAULT_TITLE_FORMAT = "[P{level}]"
DEFAULT_TITLE_COLOR = "#FFD700"  # gold
DEFAULT_BROADCAST = "{player} has reached Prestige Level {level}!"
DEFAULT_SESSION_TIMEOUT = 120
GROUP_PRIORITY = "3"

PERMISSION_USE = "use"
PERMISSION_RESET = "reset"


class PrestigeConfig:
    def __init__(
        self,
        messages=None,
        ignored_blueprints=None,
        title_format=DEFAULT_TITLE_FORMAT,
        title_color=DEFAULT_TITLE_COLOR,
        broadcast_message=DEFAULT_BROADCAST,
        broadcast_channel_id=0,
        session_timeout=DEFAULT_SESSION_TIMEOUT,
        permissions=None,
    ):
        self.messages = dict(DEFAULT_MESSAGES)
        self.messages.update(messages or {})
        self.ignored_blueprints = set(
            DEFAULT_IGNORED_BLUEPRINTS if ignored_blueprints is None else ignored_blueprints
        )
        self.title_format = title_format
        self.title_color = title_color
        self.broadcast_message = broadcast_message
        self.broadcast_channel_id = int(broadcast_channel_id or 0)
        self.session_timeout = int(session_timeout)
        # permission name -> role ids; an empty list grants it to everyone
        self.permissions = {PERMISSION_USE: [], PERMISSION_RESET: []}
        for name, roles in (permissions or {}).items():
            self.permissions[name] = [int(r) for r in roles]

    @classmethod
    def from_dict(cls, raw):
        """Builds settings from the "prestige" section of config.json."""
        raw = raw or {}
        return cls(
            messages=raw.get("Messages"),
            ignored_blueprints=raw.get("IgnoredBlueprints"),
            title_format=raw.get("TitleFormat", DEFAULT_TITLE_FORMAT),
            title_color=raw.get("TitleColorHex", DEFAULT_TITLE_COLOR),
            broadcast_message=raw.get("BroadcastMessage", DEFAULT_BROADCAST),
            broadcast_channel_id=raw.get("BroadcastChannelId", 0),
            session_timeout=raw.get("SessionTimeoutSeconds", DEFAULT_SESSION_TIMEOUT),
            permissions=raw.get("Permissions"),
        )

    def message(self, key) -> str:
        return self.messages.get(key, f"[Missing message: {key}]")


def format_message(template: str, tokens: dict = None) -> str:
    """
    Substitutes {name} placeholders from a token map.

    Unknown placeholders are left as written, so a template may mention
    tokens a particular call site does not provide.
    """
    message = template
    for name, value in (tokens or {}).items():
        message = message.replace("{" + name + "}", str(value))
    return message
