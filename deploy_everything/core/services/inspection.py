"""
Inspection — read what the deployment engine has already deployed.

Unlike the manifest, a missing journal here is abnormal: if someone asks
for the contracts of a deployment, that deployment is expected to exist.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from deploy_everything.core.errors import (
    CorruptedContractError,
    DeploymentDataError,
    NotDeployedError,
)
from deploy_everything.core.persistence.journal import (
    addresses_path,
    artifact_path,
    default_deployment_id,
    read_json_object,
)

if TYPE_CHECKING:
    from deploy_everything.core.context import ProjectContext

logger = logging.getLogger(__name__)


def effective_deployment_id(ctx: ProjectContext, deployment_id: str | None = None) -> str:
    """The given deployment id, or the active chain's canonical one."""
    return deployment_id or default_deployment_id(ctx.chain_id())


def deployed_addresses(ctx: ProjectContext, deployment_id: str | None = None) -> dict[str, str]:
    """Read the contract id → address map of a deployment.

    Raises:
        DeploymentDataError: Missing or unreadable address file.
    """
    deployment_id = effective_deployment_id(ctx, deployment_id)
    path = addresses_path(ctx.root, deployment_id)
    try:
        data = read_json_object(path)
    except (OSError, ValueError) as e:
        raise DeploymentDataError(
            f"Cannot read deployed addresses of '{deployment_id}' ({path}): {e}"
        ) from e
    # null or empty entries count as not deployed
    return {str(k): v for k, v in data.items() if isinstance(v, str) and v}


def list_deployed_contracts(ctx: ProjectContext, deployment_id: str | None = None) -> list[str]:
    """Contract ids deployed in a deployment, in journal order."""
    return list(deployed_addresses(ctx, deployment_id).keys())


def load_contract_abi(ctx: ProjectContext, deployment_id: str, contract_id: str) -> list[dict[str, Any]]:
    """Read the ABI of a deployed contract from its artifact.

    Raises:
        CorruptedContractError: Missing artifact, or missing/empty ``abi``.
    """
    path = artifact_path(ctx.root, deployment_id, contract_id)
    try:
        artifact = read_json_object(path)
    except (OSError, ValueError) as e:
        raise CorruptedContractError(contract_id, f"unreadable artifact {path}: {e}") from e

    abi = artifact.get("abi")
    if not isinstance(abi, list) or not abi:
        raise CorruptedContractError(contract_id, "missing or empty ABI")
    return abi


def resolve_contract_handle(
    ctx: ProjectContext,
    deployment_id: str | None,
    contract_id: str,
) -> Any:
    """Build a handle to a deployed contract through the engine.

    Raises:
        DeploymentDataError: Missing address file.
        NotDeployedError: Contract absent from the address map.
        CorruptedContractError: Unusable artifact.
    """
    deployment_id = effective_deployment_id(ctx, deployment_id)
    address = deployed_addresses(ctx, deployment_id).get(contract_id)
    if not address:
        raise NotDeployedError(contract_id, deployment_id)

    abi = load_contract_abi(ctx, deployment_id, contract_id)
    logger.debug("Contract %s of %s at %s", contract_id, deployment_id, address)
    return ctx.engine.contract_at(contract_id, address, abi)
