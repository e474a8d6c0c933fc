# utils/prestigeErrors.py — Error taxonomy for the prestige core

class PrestigeError(Exception):
    """Base class for every failure the prestige core reports."""


class PermissionDenied(PrestigeError):
    def __init__(self, player_id, permission):
        super().__init__(f"Player {player_id} lacks permission '{permission}'")
        self.player_id = player_id
        self.permission = permission


class NotEligible(PrestigeError):
    """Raised when a catalog gap blocks prestige. missing_item is for logs only."""

    def __init__(self, player_id, missing_item=None):
        super().__init__(f"Player {player_id} is missing blueprint: {missing_item}")
        self.player_id = player_id
        self.missing_item = missing_item


class InvalidTarget(PrestigeError):
    def __init__(self, raw):
        super().__init__(f"Invalid player id: {raw!r}")
        self.raw = raw


class NoSuchSession(PrestigeError):
    def __init__(self, player_id):
        super().__init__(f"No open prestige confirmation for {player_id}")
        self.player_id = player_id


class PersistenceFailure(PrestigeError):
    """A durable write failed; the in-progress transition must stop."""
