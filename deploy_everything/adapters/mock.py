"""
Mock engine and static loader — test doubles for the two external seams.

MockEngine is a file-backed stand-in for a real deployment engine: it
writes the same journal layout (deployed addresses + artifacts), skips
futures that are already journaled, and hands out deterministic
addresses. It never touches a chain, which also makes it useful for
rehearsing a full run offline (``--mock``).

StaticModuleLoader serves modules from a dict instead of the filesystem.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from pathlib import Path

from deploy_everything.adapters.base import DeploymentEngine, EngineError
from deploy_everything.adapters.loader import ModuleLoader, ModuleLoadError
from deploy_everything.core.models.deployment import (
    DeployArgs,
    DeploymentModule,
    DeployOutcome,
)
from deploy_everything.core.persistence.journal import (
    addresses_path,
    artifact_path,
    deployment_dir,
    read_json_object,
    write_json,
)

logger = logging.getLogger(__name__)

DEFAULT_MOCK_CHAIN_ID = 31337


def mock_address(deployment_id: str, contract_id: str) -> str:
    """Deterministic fake address for a contract within a deployment."""
    digest = hashlib.sha256(f"{deployment_id}:{contract_id}".encode("utf-8")).hexdigest()
    return "0x" + digest[:40]


class MockEngine(DeploymentEngine):
    """File-backed mock deployment engine.

    Every call is appended to ``call_log`` as ``(operation, subject)``
    tuples, e.g. ``("reset", "chain-31337")`` or ``("deploy", "LockModule")``.
    """

    def __init__(
        self,
        project_root: Path,
        chain_id: int = DEFAULT_MOCK_CHAIN_ID,
        engine_name: str = "mock",
    ):
        self._root = project_root
        self._chain_id = chain_id
        self._name = engine_name
        self._fail_on: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str]]:
        return self._call_log

    def chain_id(self) -> int:
        return self._chain_id

    def set_failure(self, module_id: str, error: str = "Mock failure") -> None:
        """Configure deploy_module to raise for a specific module id."""
        self._fail_on[module_id] = error

    def reset_journal(self, deployment_id: str | None) -> None:
        deployment_id = deployment_id or self.default_deployment_id()
        self._call_log.append(("reset", deployment_id))
        target = deployment_dir(self._root, deployment_id)
        if target.is_dir():
            shutil.rmtree(target)
            logger.info("Journal wiped: %s", target)

    def deploy_module(self, module: DeploymentModule, args: DeployArgs) -> DeployOutcome:
        deployment_id = args.deployment_id or self.default_deployment_id()
        self._call_log.append(("deploy", module.id))

        if module.id in self._fail_on:
            raise EngineError(self._fail_on[module.id])

        path = addresses_path(self._root, deployment_id)
        addresses: dict[str, str] = read_json_object(path) if path.is_file() else {}

        outcome = DeployOutcome(module_id=module.id, deployment_id=deployment_id)
        for future in module.results.values():
            if future.id in addresses:
                outcome.skipped.append(future.id)
                continue

            address = mock_address(deployment_id, future.id)
            write_json(
                artifact_path(self._root, deployment_id, future.id),
                {
                    "contractName": future.contract_name or future.id.split("#")[-1],
                    "sourceModule": module.id,
                    "abi": future.abi,
                },
            )
            addresses[future.id] = address
            outcome.deployed[future.id] = address

        if outcome.changed:
            write_json(path, addresses)

        return outcome

    def verify(self, deployment_id: str | None) -> None:
        self._call_log.append(("verify", deployment_id or self.default_deployment_id()))

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._fail_on.clear()


class StaticModuleLoader(ModuleLoader):
    """Loader backed by a path → module mapping.

    A mapped exception is raised (wrapped in ModuleLoadError) instead of
    returning a module, to simulate files that exist but fail to load.
    """

    def __init__(self, modules: dict[str, DeploymentModule | Exception] | None = None):
        self._modules: dict[str, DeploymentModule | Exception] = dict(modules or {})
        self._requested: list[str] = []

    @property
    def requested(self) -> list[str]:
        """Every path that was asked for, in order."""
        return self._requested

    def add(self, path: str, module: DeploymentModule | Exception) -> None:
        self._modules[path] = module

    def discard(self, path: str) -> None:
        self._modules.pop(path, None)

    def load_by_path(self, path: str) -> DeploymentModule:
        self._requested.append(path)
        entry = self._modules.get(path)
        if entry is None:
            raise ModuleLoadError(path, "file not found")
        if isinstance(entry, Exception):
            raise ModuleLoadError(path, str(entry)) from entry
        return entry
