"""
In-memory deployment history, newest first, bounded per user
"""

import logging
from collections import deque
from typing import Deque, Dict, Tuple

from launcher.models.deployment import HistoryEntry

HISTORY_LIMIT = 12


class HistoryLedger:
    """Per-user record of deploy attempts.

    Lives for the process lifetime only. All access happens on the event
    loop thread, so appends need no lock; a threaded or persistent backend
    would slot in behind record()/list().
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._entries: Dict[int, Deque[HistoryEntry]] = {}
        self.logger = logging.getLogger(__name__)

    def record(self, user_id: int, entry: HistoryEntry) -> None:
        """Prepend entry, dropping the oldest beyond the limit"""
        entries = self._entries.get(user_id)
        if entries is None:
            entries = deque(maxlen=self.limit)
            self._entries[user_id] = entries
        entries.appendleft(entry)
        self.logger.info(f"History for user {user_id}: {entry.target.value} {entry.status.value}")

    def list(self, user_id: int) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries.get(user_id, ()))

    def clear(self, user_id: int) -> None:
        self._entries.pop(user_id, None)
