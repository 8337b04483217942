"""
Configuration loaded from the environment (.env supported)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional

from dotenv import load_dotenv

from launcher.errors import AccessDenied, ConfigError

logger = logging.getLogger(__name__)

PLACEHOLDER_PRIVATE_KEY = "your_private_key_here"

# Sibling checkouts of the mint script and the Foundry project live next to this repo
DEFAULT_PROJECTS_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_TEMPLATES_PATH = Path(__file__).resolve().parents[1] / "templates.json"

SOLSCAN_URL = "https://solscan.io"


@dataclass(frozen=True)
class EvmNetwork:
    """An EVM chain the Foundry script can broadcast to"""
    key: str
    name: str
    rpc_url: str
    explorer_url: str
    native_symbol: str


DEFAULT_EVM_NETWORKS: Dict[str, EvmNetwork] = {
    "ethereum": EvmNetwork("ethereum", "Ethereum", "https://eth.llamarpc.com", "https://etherscan.io", "ETH"),
    "bsc": EvmNetwork("bsc", "BSC", "https://bsc-dataseed.binance.org", "https://bscscan.com", "BNB"),
    "base": EvmNetwork("base", "Base", "https://mainnet.base.org", "https://basescan.org", "ETH"),
}


@dataclass(frozen=True)
class ProjectPaths:
    """Locations of the external toolchains"""
    metaplex_dir: Path
    evm_dir: Path

    @classmethod
    def from_root(cls, root: Path) -> "ProjectPaths":
        return cls(metaplex_dir=root / "metaplex-mint", evm_dir=root / "evm-token-cli")

    @property
    def metaplex_script(self) -> Path:
        return self.metaplex_dir / "mint_via_metaplex.js"

    @property
    def evm_script(self) -> Path:
        return self.evm_dir / "script" / "DeployGenerated.s.sol"

    @property
    def evm_base_contract(self) -> Path:
        return self.evm_dir / "src" / "CustomERC20.sol"

    @property
    def evm_generated_contract(self) -> Path:
        return self.evm_dir / "src" / "GeneratedToken.sol"

    @property
    def evm_env_file(self) -> Path:
        return self.evm_dir / ".env"


@dataclass(frozen=True)
class Timeouts:
    """Per-stage process timeouts in seconds"""
    metaplex_mint: float = 8 * 60
    forge_build: float = 2 * 60
    forge_deploy: float = 6 * 60
    balance: float = 10


@dataclass(frozen=True)
class Settings:
    bot_token: str
    paths: ProjectPaths
    templates_path: Path = DEFAULT_TEMPLATES_PATH
    sol_keypair: Optional[str] = None
    evm_private_key: Optional[str] = None
    allowed_users: Optional[FrozenSet[int]] = None  # None means open access
    evm_networks: Dict[str, EvmNetwork] = field(default_factory=lambda: dict(DEFAULT_EVM_NETWORKS))
    timeouts: Timeouts = field(default_factory=Timeouts)
    log_level: str = "INFO"

    @property
    def has_evm_key(self) -> bool:
        return bool(self.evm_private_key) and self.evm_private_key != PLACEHOLDER_PRIVATE_KEY

    def is_user_allowed(self, user_id: int) -> bool:
        if self.allowed_users is None:
            return True
        return user_id in self.allowed_users

    def check_access(self, user_id: int) -> None:
        if not self.is_user_allowed(user_id):
            raise AccessDenied(user_id)


def parse_allowed_users(raw: Optional[str]) -> Optional[FrozenSet[int]]:
    """Parse ALLOWED_USERS ("123, 456"); unset or blank means open access"""
    if raw is None or not raw.strip():
        return None
    ids = set()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        try:
            ids.add(int(chunk))
        except ValueError:
            logger.warning(f"Ignoring invalid ALLOWED_USERS entry: {chunk!r}")
    return frozenset(ids)


def _env_seconds(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _load_evm_networks() -> Dict[str, EvmNetwork]:
    networks = {}
    for key, network in DEFAULT_EVM_NETWORKS.items():
        rpc_override = os.getenv(f"{key.upper()}_RPC_URL")
        if rpc_override:
            network = EvmNetwork(key, network.name, rpc_override, network.explorer_url, network.native_symbol)
        networks[key] = network
    return networks


def load_settings() -> Settings:
    """Load configuration from environment"""
    load_dotenv()

    required_vars = ['TELEGRAM_BOT_TOKEN']
    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {missing}")

    projects_root = Path(os.getenv('PROJECTS_ROOT', str(DEFAULT_PROJECTS_ROOT))).expanduser()

    return Settings(
        bot_token=os.getenv('TELEGRAM_BOT_TOKEN'),
        paths=ProjectPaths.from_root(projects_root),
        templates_path=Path(os.getenv('TEMPLATES_PATH', str(DEFAULT_TEMPLATES_PATH))).expanduser(),
        sol_keypair=os.getenv('SOL_KEYPAIR') or None,
        evm_private_key=os.getenv('EVM_PRIVATE_KEY') or None,
        allowed_users=parse_allowed_users(os.getenv('ALLOWED_USERS')),
        evm_networks=_load_evm_networks(),
        timeouts=Timeouts(
            metaplex_mint=_env_seconds('METAPLEX_TIMEOUT', Timeouts.metaplex_mint),
            forge_build=_env_seconds('FORGE_BUILD_TIMEOUT', Timeouts.forge_build),
            forge_deploy=_env_seconds('FORGE_DEPLOY_TIMEOUT', Timeouts.forge_deploy),
            balance=_env_seconds('BALANCE_TIMEOUT', Timeouts.balance),
        ),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    )
