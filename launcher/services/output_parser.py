"""
Pull token addresses and transaction ids out of deploy logs.

These functions never raise. A missing match is reported as None and shown
to the user as NOT_FOUND.
"""

import re
from typing import Optional

from launcher.models.deployment import CommandResult

NOT_FOUND = "not found in output"

_BASE58 = "1-9A-HJ-NP-Za-km-z"

MINT_PATTERN = re.compile(rf"Mint:\s*([{_BASE58}]{{32,44}})(?![{_BASE58}])")
SIGNATURE_PATTERN = re.compile(rf"Signature:\s*([{_BASE58}]{{32,88}})(?![{_BASE58}])")

EVM_TOKEN_PATTERN = re.compile(r"Token deployed:\s*(0x[a-fA-F0-9]{40})(?![a-fA-F0-9])")
EVM_TX_FIELD_PATTERN = re.compile(r"transactionHash[\s:\"]+(0x[a-fA-F0-9]{64})(?![a-fA-F0-9])", re.IGNORECASE)
EVM_TX_BARE_PATTERN = re.compile(r"\b(0x[a-fA-F0-9]{64})\b")


def _first_group(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def parse_metaplex_output(output: Optional[str]) -> CommandResult:
    text = output or ""
    return CommandResult(
        raw_output=text,
        identifier=_first_group(MINT_PATTERN, text),
        tx_hash=_first_group(SIGNATURE_PATTERN, text),
    )


def parse_evm_output(output: Optional[str]) -> CommandResult:
    text = output or ""
    tx_hash = _first_group(EVM_TX_FIELD_PATTERN, text) or _first_group(EVM_TX_BARE_PATTERN, text)
    return CommandResult(
        raw_output=text,
        identifier=_first_group(EVM_TOKEN_PATTERN, text),
        tx_hash=tx_hash,
    )
