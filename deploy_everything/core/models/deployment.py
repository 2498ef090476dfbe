"""
Deployment models — what a module declares and what an engine reports.

A deployment module file exposes a module-level ``module`` attribute
holding a DeploymentModule. Its ``results`` map a result name to a
Future, and each Future's ``id`` is the engine's stable contract
identifier (used as the key in the deployment journal).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Future(BaseModel):
    """A deployable unit inside a module."""

    id: str                          # e.g. "LockModule#Lock"
    contract_name: str = ""
    args: list[Any] = Field(default_factory=list)
    abi: list[dict[str, Any]] = Field(default_factory=list)


class DeploymentModule(BaseModel):
    """A loaded deployment module."""

    id: str
    results: dict[str, Future] = Field(default_factory=dict)

    @property
    def result_ids(self) -> list[str]:
        """Contract identifiers this module declares as results."""
        return [future.id for future in self.results.values()]


class DeployArgs(BaseModel):
    """Arguments handed to the engine for every module of a run.

    Only ``deployment_id`` is interpreted by the driver; the rest is
    passed through to the engine untouched.
    """

    deployment_id: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    strategy: str = "basic"
    strategy_config: dict[str, Any] = Field(default_factory=dict)
    default_sender: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)


class DeployOutcome(BaseModel):
    """What the engine reports after deploying one module."""

    module_id: str
    deployment_id: str
    deployed: dict[str, str] = Field(default_factory=dict)   # contract id → address
    skipped: list[str] = Field(default_factory=list)          # already journaled

    @property
    def changed(self) -> bool:
        """Whether this call produced any new deployment."""
        return bool(self.deployed)


class ContractHandle(BaseModel):
    """A deployed contract: identifier, address and interface."""

    contract_id: str
    address: str
    abi: list[dict[str, Any]]

    def function_names(self) -> list[str]:
        return self._names_of("function")

    def event_names(self) -> list[str]:
        return self._names_of("event")

    def _names_of(self, kind: str) -> list[str]:
        return [entry.get("name", "") for entry in self.abi if entry.get("type") == kind]
