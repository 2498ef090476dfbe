"""
Deployed use cases — inspect what a deployment already contains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deploy_everything.core.config.loader import ConfigError
from deploy_everything.core.errors import EverythingError
from deploy_everything.core.models.deployment import ContractHandle
from deploy_everything.core.services import inspection
from deploy_everything.core.use_cases.project import open_project


@dataclass
class DeployedContractsResult:
    deployment_id: str = ""
    addresses: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"deployment_id": self.deployment_id, "error": self.error}
        return {"deployment_id": self.deployment_id, "contracts": dict(self.addresses)}


@dataclass
class ContractResult:
    deployment_id: str = ""
    contract_id: str = ""
    handle: Any = None
    error: str | None = None

    @property
    def address(self) -> str | None:
        return getattr(self.handle, "address", None)

    @property
    def abi(self) -> list[dict[str, Any]]:
        return list(getattr(self.handle, "abi", []) or [])

    @property
    def interface(self) -> ContractHandle:
        """The handle as a ContractHandle, whatever the engine returned."""
        if isinstance(self.handle, ContractHandle):
            return self.handle
        return ContractHandle(contract_id=self.contract_id, address=self.address or "", abi=self.abi)

    def to_dict(self) -> dict:
        result: dict = {"deployment_id": self.deployment_id, "contract_id": self.contract_id}
        if self.error:
            result["error"] = self.error
            return result
        result["address"] = self.address
        result["abi"] = self.abi
        return result


def deployed_contracts(
    deployment_id: str | None = None,
    config_path: Path | None = None,
    **session_options,
) -> DeployedContractsResult:
    """List the contracts deployed in a deployment, with addresses."""
    result = DeployedContractsResult(deployment_id=deployment_id or "")
    try:
        session = open_project(config_path, **session_options)
        ctx = session.context
        result.deployment_id = inspection.effective_deployment_id(ctx, deployment_id)
        result.addresses = inspection.deployed_addresses(ctx, result.deployment_id)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result


def deployed_contract(
    contract_id: str,
    deployment_id: str | None = None,
    config_path: Path | None = None,
    **session_options,
) -> ContractResult:
    """Resolve a handle to one deployed contract."""
    result = ContractResult(deployment_id=deployment_id or "", contract_id=contract_id)
    try:
        session = open_project(config_path, **session_options)
        ctx = session.context
        result.deployment_id = inspection.effective_deployment_id(ctx, deployment_id)
        result.handle = inspection.resolve_contract_handle(ctx, result.deployment_id, contract_id)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result
