from .history import HISTORY_LIMIT, HistoryLedger
from .sessions import FIELD_SEQUENCES, Session, SessionStore

__all__ = ["HISTORY_LIMIT", "HistoryLedger", "FIELD_SEQUENCES", "Session", "SessionStore"]
