# utils/confirmations.py — Pending prestige confirmations (in memory, never persisted)

from datetime import datetime, timedelta
import pytz

OPEN = "open"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
EXPIRED = "expired"


def utc_now():
    return datetime.now(pytz.utc)


class ConfirmationSession:
    __slots__ = ("player_id", "opened_at", "state")

    def __init__(self, player_id, opened_at):
        self.player_id = player_id
        self.opened_at = opened_at
        self.state = OPEN

    @property
    def is_open(self):
        return self.state == OPEN

    def __repr__(self):
        return f"ConfirmationSession({self.player_id}, {self.state}, opened={self.opened_at.isoformat()})"


class ConfirmationTable:
    """
    At most one session per player. Opening replaces whatever was there,
    every other transition ends the session and drops it from the table.
    """

    def __init__(self, timeout_seconds=120, clock=utc_now):
        self.timeout = timedelta(seconds=timeout_seconds)
        self.clock = clock
        self._sessions = {}

    def __len__(self):
        return len(self._sessions)

    def open(self, player_id) -> ConfirmationSession:
        previous = self._sessions.pop(player_id, None)
        if previous is not None:
            previous.state = CANCELLED
            print(f"♻️ [Confirmations] Replaced open session for {player_id}")
        session = ConfirmationSession(player_id, self.clock())
        self._sessions[player_id] = session
        return session

    def is_expired(self, session, now=None) -> bool:
        return (now or self.clock()) - session.opened_at >= self.timeout

    def get_open(self, player_id):
        """The player's live session, or None. A timed-out session counts as gone."""
        session = self._sessions.get(player_id)
        if session is None or not session.is_open:
            return None
        if self.is_expired(session):
            self.close(player_id, EXPIRED)
            return None
        return session

    def expire_stale(self, player_id) -> bool:
        """Ends the player's session if it has timed out. True when one was expired."""
        session = self._sessions.get(player_id)
        if session is None or not self.is_expired(session):
            return False
        self.close(player_id, EXPIRED)
        return True

    def close(self, player_id, state):
        session = self._sessions.pop(player_id, None)
        if session is not None:
            session.state = state
        return session

    def expire_idle(self):
        """Ends every session past the timeout and returns their player ids."""
        now = self.clock()
        expired = [pid for pid, s in self._sessions.items() if self.is_expired(s, now)]
        for pid in expired:
            self.close(pid, EXPIRED)
        if expired:
            print(f"⌛ [Confirmations] Expired {len(expired)} idle session(s)")
        return expired
