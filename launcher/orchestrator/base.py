"""
Shared deploy pipeline: validation, history bookkeeping and error reporting
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from launcher.config import Settings
from launcher.database.history import HistoryLedger
from launcher.database.sessions import Session, SessionStore
from launcher.errors import PreconditionError, ValidationError
from launcher.models.deployment import DeployOutcome, DeployStatus, HistoryEntry, Target
from launcher.services.process_runner import ProcessRunner

Notify = Callable[[str], Awaitable[Any]]

SUMMARY_MAX_CHARS = 300


def ensure_file_exists(path: Path, label: str) -> None:
    if not Path(path).is_file():
        raise PreconditionError(f"Missing {label}: {path}")


def ensure_dir_exists(path: Path, label: str) -> None:
    if not Path(path).is_dir():
        raise PreconditionError(f"Missing {label} directory: {path}")


class BaseDeployer:
    """Runs one deploy per call and never lets an exception escape.

    Subclasses implement _prepare() (normalize + validate) and _execute()
    (preconditions, processes, parsing, success report). This class is the
    only place that turns failures into history entries and user messages.
    """

    target: Target
    title: str = "Deploy"

    def __init__(self, settings: Settings, history: HistoryLedger, sessions: SessionStore,
                 runner: Optional[ProcessRunner] = None):
        self.settings = settings
        self.history = history
        self.sessions = sessions
        self.runner = runner or ProcessRunner()
        self.logger = logging.getLogger(self.__class__.__module__)

    async def deploy(self, user_id: int, raw_params: Any, notify: Optional[Notify] = None,
                     session: Optional[Session] = None) -> DeployOutcome:
        """Deploy raw_params for user_id.

        A confirmation ends the pending input before anything is awaited:
        the consumed session is dropped (any session when none is given),
        so a flow started while this deploy runs survives it.
        """
        if session is None:
            self.sessions.delete(user_id)
        else:
            self.sessions.discard(user_id, session)

        try:
            params = self._prepare(raw_params)
        except ValidationError as e:
            self.logger.info(f"User {user_id} {self.target.value} params rejected: {e}")
            return DeployOutcome(False, f"❌ {e}")

        try:
            summary, message = await self._execute(params, notify)
        except Exception as e:
            self.logger.exception(f"{self.title} failed for user {user_id}")
            self._record(user_id, DeployStatus.FAILURE, str(e))
            return DeployOutcome(False, f"❌ {self.title} failed:\n{e}")

        self._record(user_id, DeployStatus.SUCCESS, summary)
        self.logger.info(f"{self.title} succeeded for user {user_id}: {summary}")
        return DeployOutcome(True, message)

    def _record(self, user_id: int, status: DeployStatus, summary: str) -> None:
        one_line = " ".join(summary.split())[:SUMMARY_MAX_CHARS]
        self.history.record(user_id, HistoryEntry(self.target, status, one_line))

    async def _notify(self, notify: Optional[Notify], text: str) -> None:
        if notify is None:
            return
        try:
            await notify(text)
        except Exception as e:
            # progress messages are cosmetic, the deploy itself goes on
            self.logger.warning(f"Progress notification failed: {e}")

    def _prepare(self, raw_params: Any):
        raise NotImplementedError

    async def _execute(self, params, notify: Optional[Notify]):
        """Return (history summary, report message)"""
        raise NotImplementedError


def report_lines(header: str, rows: List[str], links: List[Tuple[str, Optional[str]]]) -> str:
    """Success report: header, blank line, fields, then any explorer links found"""
    lines = [header, ""] + rows
    lines += [f"{label}: {url}" for label, url in links if url]
    return "\n".join(lines)
