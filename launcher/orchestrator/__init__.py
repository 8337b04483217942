from .balances import BalanceChecker
from .base import BaseDeployer
from .evm import EvmDeployer
from .metaplex import MetaplexDeployer

__all__ = ["BalanceChecker", "BaseDeployer", "EvmDeployer", "MetaplexDeployer"]
