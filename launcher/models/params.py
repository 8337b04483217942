"""
Deployment parameter records and their normalization / validation.

Normalization never fails: it trims strings, coerces numbers and falls back
to defaults. Validation is a separate step that raises ValidationError, so a
record is always normalized right before it is checked and dispatched.
"""

import math
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from launcher.errors import ValidationError

SOLANA_NETWORKS: Tuple[str, ...] = ("mainnet", "devnet")
EVM_NETWORKS: Tuple[str, ...] = ("ethereum", "bsc", "base")

SOLANA_DEFAULT_DECIMALS = 6
EVM_DEFAULT_DECIMALS = 18


@dataclass(frozen=True)
class SolanaParams:
    """Parameters for mint_via_metaplex.js"""
    name: str
    symbol: str
    tokens: float  # total supply
    uri: str  # metadata JSON URI
    decimals: int = SOLANA_DEFAULT_DECIMALS
    network: str = SOLANA_NETWORKS[0]
    prefix: str = ""  # vanity mint search
    suffix: str = ""


@dataclass(frozen=True)
class EvmParams:
    """Parameters for the generated Foundry token"""
    name: str
    symbol: str
    decimals: int = EVM_DEFAULT_DECIMALS
    network: str = EVM_NETWORKS[0]


RawParams = Union[Mapping[str, Any], SolanaParams, EvmParams, None]


def _as_mapping(raw: RawParams) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if is_dataclass(raw):
        return asdict(raw)
    return raw


def _clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_supply(value: Any) -> float:
    """Permissive float parse; anything unusable becomes 0.0"""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(_clean_str(value) if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_decimals(value: Any) -> Optional[int]:
    """Return a non-negative int, or None when the value is not one"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    else:
        text = _clean_str(value)
        try:
            number = int(text)
        except ValueError:
            try:
                as_float = float(text)
            except ValueError:
                return None
            if not math.isfinite(as_float) or not as_float.is_integer():
                return None
            number = int(as_float)
    if number < 0:
        return None
    return number


def _pick_network(value: Any, allowed: Tuple[str, ...]) -> str:
    network = _clean_str(value).lower()
    return network if network in allowed else allowed[0]


def normalize_solana_params(raw: RawParams) -> SolanaParams:
    """Coerce any params-shaped input into a fully defaulted SolanaParams"""
    data = _as_mapping(raw)
    decimals = parse_decimals(data.get("decimals"))
    return SolanaParams(
        name=_clean_str(data.get("name")),
        symbol=_clean_str(data.get("symbol")),
        tokens=parse_supply(data.get("tokens")),
        uri=_clean_str(data.get("uri")),
        decimals=SOLANA_DEFAULT_DECIMALS if decimals is None else decimals,
        network=_pick_network(data.get("network"), SOLANA_NETWORKS),
        prefix=_clean_str(data.get("prefix")),
        suffix=_clean_str(data.get("suffix")),
    )


def normalize_evm_params(raw: RawParams) -> EvmParams:
    """Coerce any params-shaped input into a fully defaulted EvmParams"""
    data = _as_mapping(raw)
    decimals = parse_decimals(data.get("decimals"))
    return EvmParams(
        name=_clean_str(data.get("name")),
        symbol=_clean_str(data.get("symbol")),
        decimals=EVM_DEFAULT_DECIMALS if decimals is None else decimals,
        network=_pick_network(data.get("network"), EVM_NETWORKS),
    )


def validate_solana_params(params: SolanaParams) -> SolanaParams:
    if not params.name or not params.symbol or not params.uri:
        raise ValidationError("Metaplex deploy needs name, symbol and uri.")
    if not math.isfinite(params.tokens) or params.tokens <= 0:
        raise ValidationError("Token supply must be a positive number.")
    return params


def validate_evm_params(params: EvmParams) -> EvmParams:
    if not params.name or not params.symbol:
        raise ValidationError("EVM deploy needs name and symbol.")
    return params
