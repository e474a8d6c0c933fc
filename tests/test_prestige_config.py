from utils.prestigeConfig import PrestigeConfig, format_message, DEFAULT_IGNORED_BLUEPRINTS


def test_format_message_substitutes_tokens():
    assert format_message("{player} reached {level}", {"player": "Ada", "level": 4}) == "Ada reached 4"


def test_format_message_leaves_unknown_placeholders():
    assert format_message("Hi {player} {unknown}", {"player": "Ada"}) == "Hi Ada {unknown}"
    assert format_message("plain") == "plain"


def test_defaults_match_plugin_settings():
    config = PrestigeConfig()
    assert config.title_format == "[P{level}]"
    assert config.title_color == "#FFD700"
    assert "m249" in config.ignored_blueprints
    assert len(config.ignored_blueprints) == len(DEFAULT_IGNORED_BLUEPRINTS)
    assert config.permissions == {"use": [], "reset": []}


def test_from_dict_overrides_and_merges_messages():
    config = PrestigeConfig.from_dict({
        "Messages": {"PrestigeUp": "GG {player}"},
        "IgnoredBlueprints": [],
        "TitleFormat": "P{level}",
        "BroadcastChannelId": "123",
        "SessionTimeoutSeconds": 45,
        "Permissions": {"reset": ["99"]},
    })
    assert config.message("PrestigeUp") == "GG {player}"
    assert config.message("NoPermission").endswith("permission to use this command.")
    assert config.ignored_blueprints == set()
    assert config.title_format == "P{level}"
    assert config.broadcast_channel_id == 123
    assert config.session_timeout == 45
    assert config.permissions["reset"] == [99]


def test_missing_message_key_is_visible():
    assert PrestigeConfig().message("Nope") == "[Missing message: Nope]"
