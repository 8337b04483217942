"""
Telegram front-end for launching Solana (Metaplex) and EVM (Foundry) tokens
"""

__version__ = "1.0.0"
