"""
Wallet balance report for the configured Solana keypair and EVM key
"""

import asyncio
import logging
import os
import shutil
import tempfile
from typing import Callable, List, Optional

from eth_account import Account
from web3 import Web3

from launcher.config import EvmNetwork, Settings
from launcher.services.commands import build_keygen_pubkey_command, build_solana_balance_command
from launcher.services.process_runner import ProcessRunner

Web3Factory = Callable[[str, float], Web3]


def default_web3_factory(rpc_url: str, timeout: float) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': timeout}))


class BalanceChecker:
    """Builds the "Check balances" message; errors become report lines"""

    def __init__(self, settings: Settings, runner: Optional[ProcessRunner] = None,
                 web3_factory: Web3Factory = default_web3_factory):
        self.settings = settings
        self.runner = runner or ProcessRunner()
        self.web3_factory = web3_factory
        self.logger = logging.getLogger(__name__)

    async def report(self) -> str:
        lines = ["💰 Balances:", ""]
        lines += await self._solana_lines()
        lines.append("")
        lines += await self._evm_lines()
        return "\n".join(lines)

    async def solana_address(self, keypair_path: str) -> str:
        """Derive the address with solana-keygen from an ASCII-only temp copy.

        solana-keygen chokes on paths with spaces or non-ASCII characters.
        """
        fd, tmp_path = tempfile.mkstemp(prefix="solana-keypair-", suffix=".json")
        os.close(fd)
        try:
            shutil.copyfile(keypair_path, tmp_path)
            output = await self.runner.run(
                build_keygen_pubkey_command(tmp_path),
                self.settings.timeouts.balance,
                label="solana-keygen pubkey",
            )
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
        return output.strip()

    async def _solana_lines(self) -> List[str]:
        keypair = self.settings.sol_keypair
        if not keypair or not os.path.isfile(keypair):
            return ["Solana: SOL_KEYPAIR is not set or the file is missing."]
        try:
            address = await self.solana_address(keypair)
            balance = await self.runner.run(
                build_solana_balance_command(address),
                self.settings.timeouts.balance,
                label="solana balance",
            )
        except Exception as e:
            self.logger.error(f"Solana balance check failed: {e}")
            return [f"Solana: check failed ({e})"]
        return [f"Solana: {address}", f"Balance: {balance.strip()}"]

    async def _evm_lines(self) -> List[str]:
        if not self.settings.has_evm_key:
            return ["EVM: EVM_PRIVATE_KEY is not set."]
        try:
            address = Account.from_key(self.settings.evm_private_key).address
        except Exception as e:
            # never echo the key itself
            self.logger.error(f"EVM_PRIVATE_KEY could not be parsed: {type(e).__name__}")
            return ["EVM: check failed (EVM_PRIVATE_KEY is not a valid key)"]

        lines = [f"EVM address: {address}"]
        for network in self.settings.evm_networks.values():
            lines.append(await self._evm_network_line(network, address))
        return lines

    async def _evm_network_line(self, network: EvmNetwork, address: str) -> str:
        try:
            w3 = self.web3_factory(network.rpc_url, self.settings.timeouts.balance)
            balance_wei = await asyncio.to_thread(w3.eth.get_balance, address)
            balance = float(w3.from_wei(balance_wei, 'ether'))
        except Exception as e:
            self.logger.warning(f"{network.name} balance query failed: {e}")
            return f"{network.name}: error"
        return f"{network.name}: {balance:.6f} {network.native_symbol}"
