from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest
import pytz

from utils.blueprintCatalog import BlueprintDefinition
from utils.confirmations import ConfirmationTable
from utils.eligibility import EligibilityChecker
from utils.prestigeConfig import PrestigeConfig
from utils.prestigeErrors import PersistenceFailure
from utils.prestigePorts import NotificationPort, PermissionPort, RankTitlePort
from utils.prestigeService import PrestigeService
from utils.prestigeStore import PrestigeStore
from utils.rankGroups import RankGroupManager

PLAYER = 76561198000000001
MODERATOR = 76561198000000099
ITEMS = ["rifle.ak", "smg.mp5", "wall.external.high"]


def run(coro):
    return asyncio.run(coro)


class FakeCatalog:
    def __init__(self, definitions, unlocks=None):
        self.definitions = definitions
        self.unlocks = unlocks or {}
        self.reset_calls = []
        self.fail_reset = False

    async def list_craftable_definitions(self):
        return list(self.definitions)

    async def unlocked_items(self, player_id):
        return set(self.unlocks.get(player_id, set()))

    async def is_unlocked(self, player_id, item_id):
        return item_id in self.unlocks.get(player_id, set())

    async def reset_unlocks(self, player_id):
        if self.fail_reset:
            raise PersistenceFailure("profile save rejected")
        self.reset_calls.append(player_id)
        self.unlocks[player_id] = set()

    def unlock_all(self, player_id):
        self.unlocks[player_id] = {d.target_item_id for d in self.definitions if d.target_item_id}


class FakePermissions(PermissionPort):
    def __init__(self):
        self.denied = set()
        self.groups = {}
        self.titles = {}

    async def has_permission(self, player_id, permission):
        return (player_id, permission) not in self.denied

    async def group_exists(self, name):
        return name in self.groups

    async def create_group(self, name, title, priority):
        self.groups[name] = set()
        self.titles[name] = title

    async def add_user_to_group(self, player_id, name):
        self.groups[name].add(player_id)

    async def remove_user_from_group(self, player_id, name):
        self.groups.get(name, set()).discard(player_id)

    def groups_of(self, player_id):
        return {name for name, members in self.groups.items() if player_id in members}


class FakeStyler(RankTitlePort):
    def __init__(self):
        self.fields = []

    async def set_group_field(self, name, field, value):
        self.fields.append((name, field, value))


class FakeNotifier(NotificationPort):
    def __init__(self):
        self.messages = []
        self.broadcasts = []
        self.shown = []
        self.destroyed = []

    async def send_to_player(self, player_id, message_key, tokens=None):
        self.messages.append((player_id, message_key, dict(tokens or {})))

    async def broadcast(self, message):
        self.broadcasts.append(message)

    async def show_confirmation(self, player_id):
        self.shown.append(player_id)

    async def destroy_confirmation(self, player_id):
        self.destroyed.append(player_id)

    def keys_for(self, player_id):
        return [key for pid, key, _ in self.messages if pid == player_id]


class FlakyStore(PrestigeStore):
    """In-memory store whose writes can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.writes = 0

    async def _write(self, data):
        if self.fail_writes:
            raise PersistenceFailure("storage unavailable")
        self.writes += 1
        await super()._write(data)


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=pytz.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class Harness:
    def __init__(self):
        self.config = PrestigeConfig(ignored_blueprints=["kayak"], session_timeout=60)
        self.catalog = FakeCatalog(
            [BlueprintDefinition(item) for item in ITEMS]
            + [BlueprintDefinition("rock", is_default=True),
               BlueprintDefinition(None),
               BlueprintDefinition("kayak")]
        )
        self.permissions = FakePermissions()
        self.styler = FakeStyler()
        self.notifier = FakeNotifier()
        self.store = FlakyStore()
        self.clock = FakeClock()
        self.sessions = ConfirmationTable(self.config.session_timeout, clock=self.clock)
        self.groups = RankGroupManager(self.permissions, self.styler, self.config.title_format, self.config.title_color)
        self.checker = EligibilityChecker(self.catalog, self.config.ignored_blueprints)
        self.audit_entries = []
        self.service = PrestigeService(
            store=self.store,
            catalog=self.catalog,
            checker=self.checker,
            sessions=self.sessions,
            groups=self.groups,
            notifier=self.notifier,
            permissions=self.permissions,
            config=self.config,
            audit=self._audit,
        )

    async def _audit(self, admin_id, target_id, action, details):
        self.audit_entries.append((admin_id, target_id, action, details))

    def prestige_once(self, player_id=PLAYER, name="Ada"):
        self.catalog.unlock_all(player_id)
        assert run(self.service.request_prestige(player_id))
        return run(self.service.confirm(player_id, name))


@pytest.fixture
def harness() -> Harness:
    return Harness()
