"""
Engine executor — replays the manifest against the deployment engine.

Flow:
    load manifest → resolve every module (fail fast) → optional journal
    reset → deploy each module in order, one at a time

Modules share the deployer account, so they are never deployed
concurrently: each deploy_module call returns only once the engine has
fully journaled that module. An engine error aborts the remaining
modules; what was already journaled stays journaled, and re-running
resumes at the failed module.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from deploy_everything.core.models.deployment import DeployArgs, DeploymentModule, DeployOutcome
from deploy_everything.core.models.manifest import ModuleDescriptor
from deploy_everything.core.persistence.manifest_file import load_manifest
from deploy_everything.core.services.resolver import resolve_module

if TYPE_CHECKING:
    from deploy_everything.core.context import ProjectContext

logger = logging.getLogger(__name__)


@dataclass
class PlannedModule:
    """A manifest entry and the module it resolved to."""

    descriptor: ModuleDescriptor
    module: DeploymentModule


@dataclass
class ExecutionReport:
    """Result of a run, filled in as modules complete."""

    operation_id: str = ""
    chain_id: int | None = None
    deployment_id: str | None = None
    reset: bool = False
    planned: list[PlannedModule] = field(default_factory=list)
    outcomes: list[DeployOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.planned)

    @property
    def executed(self) -> int:
        return len(self.outcomes)

    @property
    def contracts_deployed(self) -> int:
        return sum(len(o.deployed) for o in self.outcomes)

    @property
    def complete(self) -> bool:
        return self.executed == self.total

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "chain_id": self.chain_id,
            "deployment_id": self.deployment_id,
            "reset": self.reset,
            "total": self.total,
            "executed": self.executed,
            "contracts_deployed": self.contracts_deployed,
            "modules": [
                {
                    "filename": p.descriptor.filename,
                    "external": p.descriptor.external,
                    "module_id": p.module.id,
                }
                for p in self.planned
            ],
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }


def plan_modules(ctx: ProjectContext, chain_id: int) -> list[PlannedModule]:
    """Resolve every manifest entry, in order.

    Raises:
        ModuleImportError: On the first entry that cannot be resolved.
    """
    return [
        PlannedModule(descriptor=descriptor, module=resolve_module(ctx, descriptor, chain_id))
        for descriptor in load_manifest(ctx.manifest_file).contents
    ]


def run_modules(
    ctx: ProjectContext,
    reset: bool = False,
    deploy_args: DeployArgs | None = None,
    report: ExecutionReport | None = None,
) -> ExecutionReport:
    """Deploy every registered module, sequentially, in manifest order.

    Args:
        ctx: Project context (root, engine, loader, chain).
        reset: Wipe the engine's journal for the deployment first.
        deploy_args: Passed through to the engine for every module.
        report: Optional report to fill in place, so a caller still sees
            the progress made when an engine error propagates.

    Returns:
        The filled ExecutionReport.

    Raises:
        ModuleImportError: A module cannot be resolved (nothing deployed).
        Exception: Anything the engine raises, unchanged.
    """
    args = deploy_args or DeployArgs()
    if report is None:
        report = ExecutionReport(operation_id=generate_operation_id())

    chain_id = ctx.chain_id()
    report.chain_id = chain_id
    report.deployment_id = args.deployment_id
    report.planned = plan_modules(ctx, chain_id)

    if not report.planned:
        logger.info("No modules registered — nothing to deploy")
        return report

    if reset:
        logger.info("Resetting journal for %s", args.deployment_id or f"chain {chain_id}")
        ctx.engine.reset_journal(args.deployment_id)
        report.reset = True

    for index, planned in enumerate(report.planned, start=1):
        logger.info(
            "[%d/%d] Deploying %s (%s)",
            index,
            report.total,
            planned.module.id,
            planned.descriptor.filename,
        )
        outcome = ctx.engine.deploy_module(planned.module, args)
        report.outcomes.append(outcome)
        logger.info(
            "✓ %s → %d deployed, %d already journaled",
            planned.module.id,
            len(outcome.deployed),
            len(outcome.skipped),
        )

    return report


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"
