"""
Engine base — the protocol contract between the driver and a deployment engine.

The deployment engine owns everything on-chain: broadcasting, gas and
nonce handling, and the per-deployment journal that makes re-running a
module idempotent. The core only talks to it through this interface.

To plug in a real engine:
    1. Subclass DeploymentEngine
    2. Implement name, chain_id, reset_journal, deploy_module
    3. Expose a factory ``(project_root, network) -> engine`` and point
       ``engine:`` in everything.yml at it (``package.module:factory``)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from deploy_everything.core.models.deployment import (
    ContractHandle,
    DeployArgs,
    DeploymentModule,
    DeployOutcome,
)
from deploy_everything.core.persistence.journal import default_deployment_id


class EngineError(Exception):
    """Base class for failures reported by a deployment engine."""


class DeploymentEngine(ABC):
    """Abstract base class for deployment engines.

    Unlike the core, engines DO raise: an exception from deploy_module
    aborts the run, and whatever was already journaled stays journaled.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The engine identifier (e.g., 'mock')."""

    @abstractmethod
    def chain_id(self) -> int:
        """Chain id of the network this engine is connected to."""

    @abstractmethod
    def reset_journal(self, deployment_id: str | None) -> None:
        """Wipe the persisted journal of a deployment.

        ``None`` addresses the chain's default deployment.
        """

    @abstractmethod
    def deploy_module(self, module: DeploymentModule, args: DeployArgs) -> DeployOutcome:
        """Deploy one module and wait until it is fully journaled.

        Futures already present in the journal must be skipped.
        """

    def contract_at(self, contract_id: str, address: str, abi: list[dict[str, Any]]) -> Any:
        """Build a handle to interact with a deployed contract."""
        return ContractHandle(contract_id=contract_id, address=address, abi=abi)

    def verify(self, deployment_id: str | None) -> None:
        """Verify a deployment's contracts on a block explorer."""
        raise EngineError(f"Engine '{self.name}' does not support verification")

    def default_deployment_id(self) -> str:
        return default_deployment_id(self.chain_id())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
