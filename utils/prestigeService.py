# utils/prestigeService.py — Prestige state machine: request -> confirm/cancel -> transition

import asyncio

from utils.confirmations import CANCELLED, CONFIRMED
from utils.prestigeConfig import format_message, PERMISSION_USE, PERMISSION_RESET
from utils.prestigeErrors import (
    PermissionDenied,
    NotEligible,
    InvalidTarget,
    NoSuchSession,
    PersistenceFailure,
)

MAX_PLAYER_ID = 2 ** 64 - 1


def parse_player_id(raw) -> int:
    """Accepts a bare id or a <@id> mention."""
    text = str(raw or "").strip()
    if text.startswith("<@") and text.endswith(">"):
        text = text[2:-1].lstrip("!")
    if not (text.isascii() and text.isdigit()):
        raise InvalidTarget(raw)
    player_id = int(text)
    if player_id <= 0 or player_id > MAX_PLAYER_ID:
        raise InvalidTarget(raw)
    return player_id


class PrestigeService:
    """
    Owns the prestige workflow for every player.

    Each public coroutine runs under one asyncio.Lock, so a request,
    confirm, cancel, expiry sweep or admin reset always completes before the
    next one starts, even though they await storage and Discord calls.
    """

    def __init__(self, store, catalog, checker, sessions, groups, notifier, permissions, config, audit=None):
        self.store = store
        self.catalog = catalog
        self.checker = checker
        self.sessions = sessions
        self.groups = groups
        self.notifier = notifier
        self.permissions = permissions
        self.config = config
        self.audit = audit
        self._lock = asyncio.Lock()

    # ── guards ─────────────────────────────────────────────────────────────
    async def _require_permission(self, player_id, permission):
        if not await self.permissions.has_permission(player_id, permission):
            raise PermissionDenied(player_id, permission)

    async def _require_eligible(self, player_id):
        result = await self.checker.check_eligibility(player_id)
        if not result.eligible:
            raise NotEligible(player_id, result.missing_item)
        return result

    async def _require_session(self, player_id):
        if self.sessions.expire_stale(player_id):
            print(f"⌛ [Prestige] Confirmation for {player_id} timed out")
            await self.notifier.destroy_confirmation(player_id)
        session = self.sessions.get_open(player_id)
        if session is None:
            raise NoSuchSession(player_id)
        return session

    async def _drop_session(self, player_id, state) -> bool:
        if self.sessions.close(player_id, state) is None:
            return False
        await self.notifier.destroy_confirmation(player_id)
        return True

    # ── player workflow ────────────────────────────────────────────────────
    async def request_prestige(self, player_id) -> bool:
        """Opens a confirmation for an eligible player. Returns True when one was opened."""
        async with self._lock:
            try:
                await self._require_permission(player_id, PERMISSION_USE)
                await self._require_eligible(player_id)
            except PermissionDenied:
                print(f"🚫 [Prestige] {player_id} lacks '{PERMISSION_USE}' permission")
                await self.notifier.send_to_player(player_id, "NoPermission")
                return False
            except NotEligible:
                await self._drop_session(player_id, CANCELLED)
                await self.notifier.send_to_player(player_id, "NotAllBlueprints")
                return False

            await self._drop_session(player_id, CANCELLED)
            self.sessions.open(player_id)
            print(f"🟡 [Prestige] Confirmation opened for {player_id}")
            await self.notifier.show_confirmation(player_id)
            return True

    async def confirm(self, player_id, player_name=None) -> bool:
        """
        Commits an open confirmation. Permission and eligibility are checked
        again because either may have changed while the prompt was showing.
        Returns True when the player prestiged.
        """
        async with self._lock:
            try:
                await self._require_session(player_id)
            except NoSuchSession as e:
                print(f"ℹ️ [Prestige] Ignoring confirm: {e}")
                return False

            try:
                await self._require_permission(player_id, PERMISSION_USE)
                await self._require_eligible(player_id)
            except PermissionDenied:
                await self.notifier.send_to_player(player_id, "NoPermission")
                await self._drop_session(player_id, CANCELLED)
                return False
            except NotEligible as e:
                print(f"🔒 [Prestige] Confirm rejected for {player_id}: missing {e.missing_item}")
                await self.notifier.send_to_player(player_id, "NotAllBlueprints")
                await self._drop_session(player_id, CANCELLED)
                return False

            try:
                await self.execute_transition(player_id, player_name)
            except PersistenceFailure as e:
                print(f"💥 [Prestige] Transition aborted for {player_id}: {e}")
                await self.notifier.send_to_player(player_id, "PrestigeFailed")
                await self._drop_session(player_id, CANCELLED)
                return False

            await self._drop_session(player_id, CONFIRMED)
            return True

    async def cancel(self, player_id) -> bool:
        async with self._lock:
            session = self.sessions.close(player_id, CANCELLED)
            await self.notifier.destroy_confirmation(player_id)
            if session is not None:
                print(f"🚫 [Prestige] Confirmation cancelled by {player_id}")
            return session is not None

    async def disconnect(self, player_id):
        async with self._lock:
            if await self._drop_session(player_id, CANCELLED):
                print(f"👋 [Prestige] Dropped confirmation for departed player {player_id}")

    async def expire_idle(self):
        async with self._lock:
            expired = self.sessions.expire_idle()
            for player_id in expired:
                await self.notifier.destroy_confirmation(player_id)
            return expired

    # ── transition ─────────────────────────────────────────────────────────
    async def execute_transition(self, player_id, player_name=None) -> int:
        """
        Advances the player one prestige level. Performs no eligibility check;
        callers verify eligibility first and hold the service lock.

        The new level is persisted before blueprints are wiped, and the level
        is rolled back if the wipe fails, so a failure never leaves a player
        with reset blueprints and an unchanged level.
        """
        current = self.store.get(player_id)
        new_level = current + 1

        await self.store.set(player_id, new_level)

        try:
            await self.catalog.reset_unlocks(player_id)
        except Exception as e:
            print(f"❌ [Prestige] Blueprint reset failed for {player_id}, rolling back to {current}: {e}")
            try:
                await self.store.set(player_id, current)
            except PersistenceFailure as rollback_error:
                print(f"💥 [Prestige] Rollback failed for {player_id}: {rollback_error}")
            raise PersistenceFailure(f"Blueprint reset failed for {player_id}") from e

        await self.notifier.send_to_player(player_id, "BlueprintsReset")

        try:
            await self.groups.migrate(player_id, new_level)
        except Exception as e:
            print(f"⚠️ [Prestige] Rank group update failed for {player_id} at level {new_level}: {e}")

        tokens = {"player": player_name or str(player_id), "level": new_level}
        await self.notifier.send_to_player(player_id, "PrestigeUp", tokens)
        await self.notifier.broadcast(format_message(self.config.broadcast_message, tokens))
        print(f"🧬 [Prestige] {player_id} advanced {current} -> {new_level}")
        return new_level

    # ── admin + queries ────────────────────────────────────────────────────
    async def admin_reset(self, moderator_id, raw_target) -> bool:
        """Removes a player's prestige record. Returns True when a record was removed."""
        async with self._lock:
            try:
                await self._require_permission(moderator_id, PERMISSION_RESET)
                target_id = parse_player_id(raw_target)
            except PermissionDenied:
                await self.notifier.send_to_player(moderator_id, "NoPermission")
                return False
            except InvalidTarget as e:
                print(f"⚠️ [Prestige] {e}")
                await self.notifier.send_to_player(moderator_id, "InvalidTarget", {"player": raw_target})
                return False

            tokens = {"player": target_id}
            previous = self.store.get(target_id)
            try:
                removed = await self.store.remove(target_id)
            except PersistenceFailure as e:
                print(f"💥 [Prestige] Admin reset of {target_id} not saved: {e}")
                await self.notifier.send_to_player(moderator_id, "ResetFailed", tokens)
                return False

            if not removed:
                await self.notifier.send_to_player(moderator_id, "ResetNoRecord", tokens)
                return False

            try:
                await self.groups.clear(target_id, previous)
            except Exception as e:
                print(f"⚠️ [Prestige] Could not remove rank group for {target_id}: {e}")

            print(f"🗑️ [Prestige] {moderator_id} reset prestige of {target_id} (was {previous})")
            if self.audit is not None:
                await self.audit(moderator_id, target_id, "prestige_reset", {"previous_level": previous})

            await self.notifier.send_to_player(moderator_id, "PrestigeReset", tokens)
            await self.notifier.send_to_player(target_id, "ResetTargetNotice")
            return True

    def level_of(self, player_id) -> int:
        return self.store.get(player_id)

    def title_for(self, player_id):
        """Display title for the player's current level, None below level 1."""
        level = self.store.get(player_id)
        if level <= 0:
            return None
        return self.groups.title_for_level(level)
