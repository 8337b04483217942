"""
Shell command construction for the mint script and the Foundry project.

Every value that reaches a command line goes through shell_escape(), paths
and numbers included.
"""

import logging
from pathlib import Path
from typing import List, Union

from launcher.config import ProjectPaths
from launcher.models.params import EvmParams, SolanaParams

logger = logging.getLogger(__name__)

GENERATED_TOKEN_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.26;

import {CustomERC20} from "./CustomERC20.sol";

contract GeneratedToken is CustomERC20 {
    constructor(
        string memory name_,
        string memory symbol_,
        uint8 decimals_,
        bool enablePausable_,
        bool enablePermit_,
        address owner_
    ) CustomERC20(name_, symbol_, decimals_, enablePausable_, enablePermit_, owner_) {}

    fallback() external {}
}
"""

DEPLOY_SCRIPT_TARGET = "script/DeployGenerated.s.sol:DeployGenerated"


def shell_escape(value: Union[str, int, float, Path]) -> str:
    """Quote a value as a single POSIX shell word"""
    return "'" + str(value).replace("'", "'\\''") + "'"


def format_supply(tokens: float) -> str:
    """1000000000.0 -> '1000000000', 1.5 -> '1.5'"""
    if float(tokens).is_integer():
        return str(int(tokens))
    return repr(float(tokens))


def build_metaplex_command(params: SolanaParams, paths: ProjectPaths, keypair_path: str) -> str:
    parts: List[str] = [
        f"cd {shell_escape(paths.metaplex_dir)}",
        "&&",
        f"SOL_KEYPAIR={shell_escape(keypair_path)}",
        "node", shell_escape(paths.metaplex_script.name),
        "--name", shell_escape(params.name),
        "--symbol", shell_escape(params.symbol),
        "--tokens", shell_escape(format_supply(params.tokens)),
        "--uri", shell_escape(params.uri),
        "--decimals", shell_escape(params.decimals),
        "--network", shell_escape(params.network),
    ]
    if params.prefix:
        parts += ["--prefix", shell_escape(params.prefix)]
    if params.suffix:
        parts += ["--suffix", shell_escape(params.suffix)]
    return " ".join(parts)


def build_forge_build_command(paths: ProjectPaths) -> str:
    return f"cd {shell_escape(paths.evm_dir)} && forge build"


def build_forge_deploy_command(paths: ProjectPaths, rpc_url: str) -> str:
    return (
        f"cd {shell_escape(paths.evm_dir)} && forge script {DEPLOY_SCRIPT_TARGET} "
        f"--rpc-url {shell_escape(rpc_url)} --broadcast"
    )


def build_keygen_pubkey_command(keypair_path: Union[str, Path]) -> str:
    return f"solana-keygen pubkey {shell_escape(keypair_path)}"


def build_solana_balance_command(address: str) -> str:
    return f"solana balance {shell_escape(address)}"


def _env_value(value: Union[str, int]) -> str:
    # one variable per line, so line breaks inside a value are flattened
    return " ".join(str(value).splitlines()).strip()


def render_env_file(params: EvmParams, private_key: str) -> str:
    lines = [
        f"TOKEN_NAME={_env_value(params.name)}",
        f"TOKEN_SYMBOL={_env_value(params.symbol)}",
        f"TOKEN_DECIMALS={params.decimals}",
        "ENABLE_PAUSABLE=false",
        "ENABLE_PERMIT=false",
        f"PRIVATE_KEY={_env_value(private_key)}",
        "",
    ]
    return "\n".join(lines)


def write_generated_contract(paths: ProjectPaths) -> Path:
    """Write the GeneratedToken wrapper next to CustomERC20.sol"""
    target = paths.evm_generated_contract
    target.write_text(GENERATED_TOKEN_SOURCE, encoding="utf-8")
    return target


def write_env_file(paths: ProjectPaths, params: EvmParams, private_key: str) -> Path:
    """Write the transient .env read by the deploy script; caller must remove it"""
    target = paths.evm_env_file
    target.write_text(render_env_file(params, private_key), encoding="utf-8")
    try:
        target.chmod(0o600)
    except OSError as e:
        logger.warning(f"Could not restrict permissions on {target}: {e}")
    return target
