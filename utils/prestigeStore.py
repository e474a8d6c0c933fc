# utils/prestigeStore.py — Player prestige levels (sparse map, save-on-change)

from utils.fileIO import load_file, save_file, PRESTIGE_LEVELS_PATH
from utils.prestigeErrors import PersistenceFailure


class PrestigeStore:
    """
    Maps player id -> prestige level.

    Only levels above zero are kept; a missing player is level 0. Every
    mutation is persisted before it returns, and a failed save restores the
    previous in-memory value before PersistenceFailure propagates.

    This base class persists to an in-memory snapshot, which is all the
    tests need. RemotePrestigeStore writes through utils.fileIO instead.
    """

    def __init__(self, initial=None):
        self.levels = {}
        self._snapshot = dict(initial or {})

    def get(self, player_id) -> int:
        return self.levels.get(int(player_id), 0)

    def __contains__(self, player_id):
        return int(player_id) in self.levels

    def __len__(self):
        return len(self.levels)

    async def set(self, player_id, level: int):
        player_id = int(player_id)
        if level < 0:
            raise ValueError(f"Prestige level cannot be negative: {level}")

        previous = self.levels.get(player_id)
        if level == 0:
            self.levels.pop(player_id, None)
        else:
            self.levels[player_id] = level

        try:
            await self.save_all()
        except PersistenceFailure:
            self._restore(player_id, previous)
            raise

    async def remove(self, player_id) -> bool:
        """Administrative reset. Returns False (and writes nothing) when there is no record."""
        player_id = int(player_id)
        if player_id not in self.levels:
            return False

        previous = self.levels.pop(player_id)
        try:
            await self.save_all()
        except PersistenceFailure:
            self._restore(player_id, previous)
            raise
        return True

    def _restore(self, player_id, previous):
        if previous is None:
            self.levels.pop(player_id, None)
        else:
            self.levels[player_id] = previous
        print(f"↩️ [PrestigeStore] Restored level for {player_id} after failed save")

    async def load_all(self):
        data = await self._read() or {}
        self.levels = {}
        for key, value in data.items():
            level = int(value)
            if level > 0:
                self.levels[int(key)] = level
        print(f"📥 [PrestigeStore] Loaded {len(self.levels)} prestige records")

    async def save_all(self):
        data = {str(pid): level for pid, level in sorted(self.levels.items())}
        await self._write(data)

    async def _read(self):
        return dict(self._snapshot)

    async def _write(self, data):
        self._snapshot = dict(data)


class RemotePrestigeStore(PrestigeStore):
    """Persists the whole map as one JSON document in remote storage."""

    def __init__(self, path=PRESTIGE_LEVELS_PATH):
        super().__init__()
        self.path = path

    async def _read(self):
        data = await load_file(self.path)
        if data is not None and not isinstance(data, dict):
            print(f"⚠️ [PrestigeStore] {self.path} is not a JSON object, ignoring it")
            return {}
        return data

    async def _write(self, data):
        await save_file(self.path, data)
