"""
Solana token launches through the Metaplex mint script
"""

from typing import Any, Optional, Tuple

from launcher.errors import PreconditionError
from launcher.models.deployment import Target
from launcher.models.params import SolanaParams, normalize_solana_params, validate_solana_params
from launcher.orchestrator.base import BaseDeployer, Notify, ensure_dir_exists, ensure_file_exists, report_lines
from launcher.services.commands import build_metaplex_command, format_supply
from launcher.services.explorer import solscan_token_url, solscan_tx_url
from launcher.services.output_parser import NOT_FOUND, parse_metaplex_output


class MetaplexDeployer(BaseDeployer):
    target = Target.METAPLEX
    title = "Metaplex deploy"

    def _prepare(self, raw_params: Any) -> SolanaParams:
        return validate_solana_params(normalize_solana_params(raw_params))

    def _check_preconditions(self) -> str:
        paths = self.settings.paths
        ensure_dir_exists(paths.metaplex_dir, "metaplex-mint")
        ensure_file_exists(paths.metaplex_script, paths.metaplex_script.name)

        keypair = self.settings.sol_keypair
        if not keypair:
            raise PreconditionError("SOL_KEYPAIR is not set in .env")
        ensure_file_exists(keypair, "SOL_KEYPAIR")
        return keypair

    async def _execute(self, params: SolanaParams, notify: Optional[Notify]) -> Tuple[str, str]:
        keypair = self._check_preconditions()

        await self._notify(notify, "⏳ Starting Solana (Metaplex) deploy...")
        self.logger.info(f"Minting {params.name} ({params.symbol}) on {params.network}")

        command = build_metaplex_command(params, self.settings.paths, keypair)
        output = await self.runner.run(command, self.settings.timeouts.metaplex_mint, label="Metaplex mint")
        result = parse_metaplex_output(output)

        mint = result.identifier or NOT_FOUND
        if result.identifier is None:
            self.logger.warning("Mint address not found in Metaplex output")

        summary = f"{params.name} ({params.symbol}), mint: {mint}"
        message = report_lines(
            "✅ Solana token deployed",
            [
                f"Network: {params.network}",
                f"Mint: {mint}",
                f"Name: {params.name}",
                f"Symbol: {params.symbol}",
                f"Supply: {format_supply(params.tokens)}",
            ],
            [
                ("Solscan token", solscan_token_url(result.identifier, params.network)),
                ("Solscan tx", solscan_tx_url(result.tx_hash, params.network)),
            ],
        )
        return summary, message
