from .deployment import CommandResult, DeployOutcome, DeployStatus, HistoryEntry, Target
from .params import (
    EVM_NETWORKS,
    SOLANA_NETWORKS,
    EvmParams,
    SolanaParams,
    normalize_evm_params,
    normalize_solana_params,
    validate_evm_params,
    validate_solana_params,
)

__all__ = [
    "CommandResult",
    "DeployOutcome",
    "DeployStatus",
    "HistoryEntry",
    "Target",
    "EVM_NETWORKS",
    "SOLANA_NETWORKS",
    "EvmParams",
    "SolanaParams",
    "normalize_evm_params",
    "normalize_solana_params",
    "validate_evm_params",
    "validate_solana_params",
]
