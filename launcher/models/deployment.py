"""
Deployment records shared by the orchestrators, the history ledger and the bot
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Target(str, Enum):
    """Deployment ecosystems, values match template keys and callback data"""
    METAPLEX = "metaplex"
    EVM = "evm"

    @classmethod
    def parse(cls, value: str) -> Optional["Target"]:
        try:
            return cls(value)
        except ValueError:
            return None


class DeployStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class HistoryEntry:
    """One deployment attempt, kept in the per-user history"""
    target: Target
    status: DeployStatus
    summary: str  # one line shown in "My deploys"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def succeeded(self) -> bool:
        return self.status is DeployStatus.SUCCESS


@dataclass(frozen=True)
class CommandResult:
    """Identifiers pulled out of a process log"""
    raw_output: str
    identifier: Optional[str] = None  # mint or contract address
    tx_hash: Optional[str] = None  # Solana signature or EVM tx hash


@dataclass(frozen=True)
class DeployOutcome:
    """What an orchestrator hands back to the chat layer"""
    success: bool
    message: str
