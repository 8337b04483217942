"""Tests for the balance report with fake processes and a fake Web3."""

import os
import shlex

from conftest import FakeRunner
from eth_account import Account

from launcher.errors import ProcessError
from launcher.orchestrator.balances import BalanceChecker

SOL_ADDRESS = "AuthPubkey1111111111111111111111111111111"


class FakeEth:
    def __init__(self, balance_wei, fail):
        self.balance_wei = balance_wei
        self.fail = fail

    def get_balance(self, address):
        if self.fail:
            raise ConnectionError("rpc down")
        return self.balance_wei


class FakeWeb3:
    def __init__(self, balance_wei, fail=False):
        self.eth = FakeEth(balance_wei, fail)

    @staticmethod
    def from_wei(value, unit):
        assert unit == "ether"
        return value / 10**18


def _factory(failing=()):
    def make(rpc_url, timeout):
        return FakeWeb3(2 * 10**18, fail=rpc_url in failing)
    return make


async def test_full_report(settings):
    runner = FakeRunner([SOL_ADDRESS + "\n", "1.5 SOL\n"])
    checker = BalanceChecker(settings, runner, web3_factory=_factory(failing={"https://bsc-dataseed.binance.org"}))

    report = await checker.report()

    assert f"Solana: {SOL_ADDRESS}" in report
    assert "Balance: 1.5 SOL" in report
    assert f"EVM address: {Account.from_key(settings.evm_private_key).address}" in report
    assert "Ethereum: 2.000000 ETH" in report
    assert "BSC: error" in report
    assert "Base: 2.000000 ETH" in report

    keygen_words = shlex.split(runner.calls[0][0])
    assert keygen_words[:2] == ["solana-keygen", "pubkey"]
    assert os.path.basename(keygen_words[2]).startswith("solana-keypair-")
    assert not os.path.exists(keygen_words[2])
    assert shlex.split(runner.calls[1][0]) == ["solana", "balance", SOL_ADDRESS]


async def test_temp_keypair_removed_when_keygen_fails(settings):
    runner = FakeRunner([ProcessError("solana-keygen pubkey failed with exit code 1")])
    checker = BalanceChecker(settings, runner, web3_factory=_factory())

    report = await checker.report()

    assert "Solana: check failed" in report
    assert not os.path.exists(shlex.split(runner.calls[0][0])[2])


async def test_missing_credentials(make_settings):
    settings = make_settings(sol_keypair=None, evm_private_key=None)
    runner = FakeRunner()
    report = await BalanceChecker(settings, runner, web3_factory=_factory()).report()

    assert "SOL_KEYPAIR is not set" in report
    assert "EVM_PRIVATE_KEY is not set" in report
    assert runner.calls == []


async def test_invalid_evm_key_is_not_echoed(make_settings):
    settings = make_settings(sol_keypair=None, evm_private_key="not-a-key")
    report = await BalanceChecker(settings, FakeRunner(), web3_factory=_factory()).report()
    assert "not a valid key" in report
    assert "not-a-key" not in report
