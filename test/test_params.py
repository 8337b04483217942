"""Tests for parameter normalization and validation."""

import pytest

from launcher.errors import ValidationError
from launcher.models.params import (
    EvmParams,
    SolanaParams,
    normalize_evm_params,
    normalize_solana_params,
    parse_decimals,
    validate_evm_params,
    validate_solana_params,
)


def test_solana_defaults_and_trimming():
    params = normalize_solana_params({
        "name": "  Moon Cat ",
        "symbol": " MCAT",
        "tokens": "1000000000",
        "uri": " https://example.com/m.json ",
    })
    assert params == SolanaParams(
        name="Moon Cat",
        symbol="MCAT",
        tokens=1_000_000_000.0,
        uri="https://example.com/m.json",
        decimals=6,
        network="mainnet",
        prefix="",
        suffix="",
    )


def test_solana_invalid_network_falls_back_to_mainnet():
    assert normalize_solana_params({"network": "testnet"}).network == "mainnet"
    assert normalize_solana_params({"network": " DevNet "}).network == "devnet"


def test_evm_defaults():
    params = normalize_evm_params({"name": "Base Token", "symbol": "BTKN"})
    assert params == EvmParams(name="Base Token", symbol="BTKN", decimals=18, network="ethereum")


def test_evm_invalid_network_and_decimals_fall_back():
    params = normalize_evm_params({"name": "a", "symbol": "b", "decimals": "eight", "network": "polygon"})
    assert params.decimals == 18
    assert params.network == "ethereum"


@pytest.mark.parametrize("raw, expected", [
    (9, 9),
    ("12", 12),
    (" 0 ", 0),
    (8.0, 8),
    ("6.0", 6),
    (-1, None),
    ("1.5", None),
    ("abc", None),
    (None, None),
    (True, None),
])
def test_parse_decimals(raw, expected):
    assert parse_decimals(raw) == expected


@pytest.mark.parametrize("raw", ["abc", None, "", "nan", "inf", True])
def test_unusable_supply_becomes_zero(raw):
    assert normalize_solana_params({"tokens": raw}).tokens == 0.0


def test_normalize_is_idempotent():
    raw = {"name": " x ", "symbol": "y ", "tokens": "5", "uri": "u", "decimals": "3",
           "network": "DEVNET", "prefix": " ab", "suffix": None}
    once = normalize_solana_params(raw)
    assert normalize_solana_params(once) == once

    evm_once = normalize_evm_params({"name": " n", "symbol": "s", "decimals": None, "network": "BSC"})
    assert normalize_evm_params(evm_once) == evm_once


def test_normalize_tolerates_none():
    assert normalize_evm_params(None).name == ""
    assert normalize_solana_params(None).tokens == 0.0


def test_solana_validation_requires_name_symbol_uri():
    params = normalize_solana_params({"name": "", "symbol": "S", "tokens": 10, "uri": "u"})
    with pytest.raises(ValidationError, match="name, symbol and uri"):
        validate_solana_params(params)


def test_solana_validation_requires_positive_supply():
    params = normalize_solana_params({"name": "n", "symbol": "S", "tokens": "-5", "uri": "u"})
    with pytest.raises(ValidationError, match="positive"):
        validate_solana_params(params)


def test_evm_validation():
    with pytest.raises(ValidationError):
        validate_evm_params(normalize_evm_params({"name": "n"}))
    ok = normalize_evm_params({"name": "n", "symbol": "s"})
    assert validate_evm_params(ok) is ok
