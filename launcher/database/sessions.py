"""
Custom-flow sessions: one in-progress parameter collection per user
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from launcher.models.deployment import Target

# Prompted fields per target; Solana decimals are defaulted, not asked
FIELD_SEQUENCES: Dict[Target, Tuple[str, ...]] = {
    Target.METAPLEX: ("name", "symbol", "tokens", "uri", "network"),
    Target.EVM: ("name", "symbol", "decimals", "network"),
}


@dataclass
class Session:
    """Step cursor through a target's field sequence.

    step always indexes a real field. Answering the last field flips
    ready instead of moving the cursor past the end.
    """
    target: Target
    step: int = 0
    collected: Dict[str, str] = field(default_factory=dict)
    ready: bool = False

    @property
    def fields(self) -> Tuple[str, ...]:
        return FIELD_SEQUENCES[self.target]

    @property
    def current_field(self) -> Optional[str]:
        if self.ready:
            return None
        return self.fields[self.step]

    def answer(self, value: str) -> None:
        """Store value for the current field and move on"""
        if self.ready:
            raise RuntimeError("Session already has every field")
        self.collected[self.fields[self.step]] = value
        if self.step == len(self.fields) - 1:
            self.ready = True
        else:
            self.step += 1


class SessionStore:
    """Sessions keyed by user id, last write wins.

    Mutations run on the event loop thread between awaits; a multi-threaded
    runtime would need a per-user lock around get/answer/set.
    """

    def __init__(self):
        self._sessions: Dict[int, Session] = {}
        self.logger = logging.getLogger(__name__)

    def get(self, user_id: int) -> Optional[Session]:
        return self._sessions.get(user_id)

    def set(self, user_id: int, session: Session) -> None:
        self._sessions[user_id] = session

    def delete(self, user_id: int) -> None:
        if self._sessions.pop(user_id, None) is not None:
            self.logger.debug(f"Session cleared for user {user_id}")

    def pop(self, user_id: int) -> Optional[Session]:
        """Remove and return the user's session, if any"""
        return self._sessions.pop(user_id, None)

    def discard(self, user_id: int, session: Session) -> None:
        """Delete the user's session only if it is still this one"""
        if self._sessions.get(user_id) is session:
            self.delete(user_id)

    def start(self, user_id: int, target: Target) -> Session:
        """Begin a custom flow, discarding whatever was in progress"""
        session = Session(target=target)
        self._sessions[user_id] = session
        self.logger.info(f"User {user_id} started {target.value} custom flow")
        return session

    def __len__(self) -> int:
        return len(self._sessions)
