"""
Shared fixtures: a fake toolchain layout on disk and a scripted process runner
"""

from typing import List, Optional, Union

import pytest

from launcher.config import ProjectPaths, Settings
from launcher.database import HistoryLedger, SessionStore
from launcher.errors import ProcessError

MINT = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCTawpStiHRqwFzvXzEwzNBG5yB2LG1Kv5hoGZfPDxo3JVq3tYuw"
EVM_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
EVM_TX = "0x" + "ab" * 32
EVM_KEY = "0x" + "11" * 32


class FakeRunner:
    """Returns queued outputs (or raises queued errors) in call order"""

    def __init__(self, results: Optional[List[Union[str, Exception]]] = None):
        self.results = list(results or [])
        self.calls = []

    async def run(self, command: str, timeout: float, label: str = "command") -> str:
        self.calls.append((command, timeout, label))
        result = self.results.pop(0) if self.results else ""
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "projects"
    metaplex = root / "metaplex-mint"
    metaplex.mkdir(parents=True)
    (metaplex / "mint_via_metaplex.js").write_text("// mint script\n")

    evm = root / "evm-token-cli"
    (evm / "script").mkdir(parents=True)
    (evm / "src").mkdir()
    (evm / "script" / "DeployGenerated.s.sol").write_text("// deploy script\n")
    (evm / "src" / "CustomERC20.sol").write_text("// base contract\n")
    return root


@pytest.fixture
def keypair_file(tmp_path):
    path = tmp_path / "id.json"
    path.write_text("[1,2,3]")
    return path


@pytest.fixture
def make_settings(project_root, keypair_file):
    def _make(**overrides) -> Settings:
        values = {
            "bot_token": "123:abc",
            "paths": ProjectPaths.from_root(project_root),
            "sol_keypair": str(keypair_file),
            "evm_private_key": EVM_KEY,
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def history():
    return HistoryLedger()


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def process_error():
    return ProcessError("forge build failed with exit code 1", output="Compiler error: boom", returncode=1)
