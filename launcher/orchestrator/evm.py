"""
EVM token launches through the Foundry project (forge build + forge script)
"""

import asyncio
from typing import Any, Optional, Tuple

from launcher.config import EvmNetwork
from launcher.errors import PreconditionError
from launcher.models.deployment import Target
from launcher.models.params import EvmParams, normalize_evm_params, validate_evm_params
from launcher.orchestrator.base import BaseDeployer, Notify, ensure_dir_exists, ensure_file_exists, report_lines
from launcher.services.commands import (
    build_forge_build_command,
    build_forge_deploy_command,
    write_env_file,
    write_generated_contract,
)
from launcher.services.explorer import evm_address_url, evm_tx_url
from launcher.services.output_parser import NOT_FOUND, parse_evm_output


class EvmDeployer(BaseDeployer):
    target = Target.EVM
    title = "EVM deploy"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._workdir_lock: Optional[asyncio.Lock] = None

    def _prepare(self, raw_params: Any) -> EvmParams:
        return validate_evm_params(normalize_evm_params(raw_params))

    def _check_preconditions(self, params: EvmParams) -> Tuple[str, EvmNetwork]:
        if not self.settings.has_evm_key:
            raise PreconditionError("EVM_PRIVATE_KEY is not set in .env")

        network = self.settings.evm_networks.get(params.network)
        if network is None:
            raise PreconditionError(f"No RPC configured for EVM network {params.network}")

        paths = self.settings.paths
        ensure_dir_exists(paths.evm_dir, "evm-token-cli")
        ensure_file_exists(paths.evm_script, paths.evm_script.name)
        ensure_file_exists(paths.evm_base_contract, paths.evm_base_contract.name)
        return self.settings.evm_private_key, network

    async def _execute(self, params: EvmParams, notify: Optional[Notify]) -> Tuple[str, str]:
        private_key, network = self._check_preconditions(params)
        paths = self.settings.paths
        timeouts = self.settings.timeouts

        await self._notify(notify, f"⏳ Starting EVM token deploy on {network.name}...")
        self.logger.info(f"Deploying {params.name} ({params.symbol}) to {network.name}")

        # GeneratedToken.sol and .env are shared by every deploy from this project
        if self._workdir_lock is None:
            self._workdir_lock = asyncio.Lock()
        if self._workdir_lock.locked():
            self.logger.info(f"Waiting for the running EVM deploy to finish before {params.symbol}")

        async with self._workdir_lock:
            try:
                write_generated_contract(paths)
                write_env_file(paths, params, private_key)

                await self.runner.run(build_forge_build_command(paths), timeouts.forge_build, label="forge build")
                output = await self.runner.run(
                    build_forge_deploy_command(paths, network.rpc_url),
                    timeouts.forge_deploy,
                    label="forge script",
                )
            finally:
                paths.evm_env_file.unlink(missing_ok=True)

        result = parse_evm_output(output)
        address = result.identifier or NOT_FOUND
        if result.identifier is None:
            self.logger.warning("Token address not found in forge output")

        summary = f"{params.name} ({params.symbol}), {network.name}, address: {address}"
        message = report_lines(
            "✅ EVM token deployed",
            [
                f"Network: {network.name}",
                f"Address: {address}",
                f"Name: {params.name}",
                f"Symbol: {params.symbol}",
                f"Decimals: {params.decimals}",
            ],
            [
                ("Explorer token", evm_address_url(result.identifier, network)),
                ("Explorer tx", evm_tx_url(result.tx_hash, network)),
            ],
        )
        return summary, message
