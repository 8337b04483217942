"""
Block explorer links for deploy reports
"""

from typing import Optional

from launcher.config import SOLSCAN_URL, EvmNetwork

SOLANA_DEFAULT_NETWORK = "mainnet"


def solana_cluster_suffix(network: str) -> str:
    """Solscan needs ?cluster=... for anything but mainnet"""
    if network == SOLANA_DEFAULT_NETWORK:
        return ""
    return f"?cluster={network}"


def solscan_token_url(mint: Optional[str], network: str) -> Optional[str]:
    if not mint:
        return None
    return f"{SOLSCAN_URL}/token/{mint}{solana_cluster_suffix(network)}"


def solscan_tx_url(signature: Optional[str], network: str) -> Optional[str]:
    if not signature:
        return None
    return f"{SOLSCAN_URL}/tx/{signature}{solana_cluster_suffix(network)}"


def evm_address_url(address: Optional[str], network: EvmNetwork) -> Optional[str]:
    if not address:
        return None
    return f"{network.explorer_url}/address/{address}"


def evm_tx_url(tx_hash: Optional[str], network: EvmNetwork) -> Optional[str]:
    if not tx_hash:
        return None
    return f"{network.explorer_url}/tx/{tx_hash}"
