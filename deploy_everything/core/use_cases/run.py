"""
Run use case — deploy every registered module on the selected network.

This is the top-level orchestrator: it loads config, builds the deploy
arguments (parameters file, strategy config), drives the executor,
optionally asks the engine to verify, and records the run in the run
ledger whether it succeeded or not.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from deploy_everything.core.config.loader import ConfigError, load_parameters
from deploy_everything.core.engine.executor import (
    ExecutionReport,
    generate_operation_id,
    run_modules,
)
from deploy_everything.core.models.deployment import DeployArgs
from deploy_everything.core.persistence.run_ledger import RunLedger, RunRecord
from deploy_everything.core.persistence.journal import default_deployment_id
from deploy_everything.core.use_cases.project import ProjectSession, open_project

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running the full deployment."""

    report: ExecutionReport | None = None
    network: str = ""
    project_root: Path | None = None
    verified: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        result["network"] = self.network
        result["project_root"] = str(self.project_root) if self.project_root else None
        result["verified"] = self.verified
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_everything(
    config_path: Path | None = None,
    network: str | None = None,
    parameters_file: str | None = None,
    strategy: str = "basic",
    deployment_id: str | None = None,
    default_sender: str | None = None,
    reset: bool = False,
    verify: bool = False,
    mock_mode: bool = False,
    session: ProjectSession | None = None,
) -> RunResult:
    """Deploy all registered modules in order.

    Args:
        config_path: Optional explicit path to everything.yml.
        network: Optional network name.
        parameters_file: Optional JSON file with module parameters.
        strategy: Engine deployment strategy name.
        deployment_id: Optional deployment id (default: per chain).
        default_sender: Optional default sender account.
        reset: Wipe the deployment journal before deploying.
        verify: Ask the engine to verify the deployment afterwards.
        mock_mode: Use the mock engine.
        session: Optional pre-built session (overrides the above loading).

    Returns:
        RunResult with the execution report (possibly partial).
    """
    result = RunResult()

    try:
        if session is None:
            session = open_project(config_path, network=network, mock_mode=mock_mode)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.network = session.network.name
    result.project_root = session.root

    args = DeployArgs(
        deployment_id=deployment_id,
        parameters=load_parameters(parameters_file),
        strategy=strategy,
        strategy_config=session.project.strategy_config_for(strategy),
        default_sender=default_sender,
    )

    report = ExecutionReport(operation_id=generate_operation_id())
    result.report = report
    started = time.monotonic()

    try:
        run_modules(session.context, reset=reset, deploy_args=args, report=report)
        if verify:
            session.context.engine.verify(deployment_id)
            result.verified = True
    except Exception as e:
        logger.error("Run %s aborted: %s", report.operation_id, e)
        result.error = str(e) or type(e).__name__

    _record(session, report, result, int((time.monotonic() - started) * 1000))
    return result


def _record(session: ProjectSession, report: ExecutionReport, result: RunResult, elapsed_ms: int) -> None:
    deployment_id = report.deployment_id
    if deployment_id is None and report.chain_id is not None:
        deployment_id = default_deployment_id(report.chain_id)

    RunLedger.for_project(session.root).append(
        RunRecord(
            operation_id=report.operation_id,
            network=session.network.name,
            chain_id=report.chain_id,
            deployment_id=deployment_id,
            reset=report.reset,
            modules=[p.module.id for p in report.planned],
            modules_executed=report.executed,
            contracts_deployed=report.contracts_deployed,
            verified=result.verified,
            status="ok" if result.ok else "failed",
            duration_ms=elapsed_ms,
            error=result.error,
        )
    )
