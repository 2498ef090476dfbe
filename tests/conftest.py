"""
Shared test fixtures and configuration.

``project_dir`` is a throwaway contracts project: an everything.yml with
two networks and one deployment module at ignition/modules/Lock.py.
"""

import textwrap
from pathlib import Path

import pytest

from deploy_everything.adapters.mock import MockEngine
from deploy_everything.core.context import ProjectContext

PROJECT_YML = textwrap.dedent("""\
    name: test-contracts
    engine: mock
    default_network: localhost
    networks:
      - name: localhost
        chain_id: 31337
      - name: polygon
        chain_id: 137
    ignition:
      strategy_config:
        create2:
          salt: "0x01"
""")

SAMPLE_ABI = [
    {
        "type": "function",
        "name": "withdraw",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {"type": "event", "name": "Withdrawal", "inputs": [], "anonymous": False},
]


def module_source(module_id: str, *contracts: str) -> str:
    """Source of a module file declaring one result per contract name."""
    results = {
        name.lower(): {
            "id": f"{module_id}#{name}",
            "contract_name": name,
            "abi": SAMPLE_ABI,
        }
        for name in contracts
    }
    return f"module = {{'id': {module_id!r}, 'results': {results!r}}}\n"


def write_module(root: Path, relative: str, source: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the caller's shell from leaking into network/log selection."""
    for name in ("EVERYTHING_NETWORK", "EVERYTHING_LOG_LEVEL", "EVERYTHING_LOG_FILE", "EVERYTHING_LOG_FILE_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project root with everything.yml and ignition/modules/Lock.py."""
    (tmp_path / "everything.yml").write_text(PROJECT_YML)
    write_module(tmp_path, "ignition/modules/Lock.py", module_source("LockModule", "Lock"))
    return tmp_path


@pytest.fixture
def engine(project_dir: Path) -> MockEngine:
    return MockEngine(project_dir)


@pytest.fixture
def ctx(project_dir: Path, engine: MockEngine) -> ProjectContext:
    """Context over ``project_dir`` with the real file loader."""
    return ProjectContext(root=project_dir, engine=engine)


@pytest.fixture
def external_pkg(tmp_path: Path, monkeypatch) -> Path:
    """An importable package ``acme_modules`` holding external modules."""
    site = tmp_path / "site-packages"
    package = site / "acme_modules"
    package.mkdir(parents=True)
    (package / "__init__.py").write_text("")
    write_module(package, "ignition/Token.py", module_source("TokenModule", "Token"))
    monkeypatch.syspath_prepend(str(site))
    return package
