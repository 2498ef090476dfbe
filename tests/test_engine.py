"""
Tests for the execution driver — ordering, reset, fail-fast and resume.
"""

import os
from pathlib import Path

import pytest

from deploy_everything.adapters.base import EngineError
from deploy_everything.adapters.mock import MockEngine, StaticModuleLoader
from deploy_everything.core.context import ProjectContext
from deploy_everything.core.engine.executor import (
    ExecutionReport,
    generate_operation_id,
    plan_modules,
    run_modules,
)
from deploy_everything.core.errors import ModuleImportError
from deploy_everything.core.models.deployment import DeployArgs, DeploymentModule, Future
from deploy_everything.core.models.manifest import Manifest, ModuleDescriptor
from deploy_everything.core.persistence.manifest_file import save_manifest


def _module(module_id: str) -> DeploymentModule:
    return DeploymentModule(
        id=module_id,
        results={"main": Future(id=f"{module_id}#Main", abi=[{"type": "function", "name": "f"}])},
    )


@pytest.fixture
def three_modules(tmp_path: Path) -> ProjectContext:
    """Manifest A, B, C with a loader that knows all three."""
    loader = StaticModuleLoader({
        f"{tmp_path}{os.sep}m/{name}.py": _module(name) for name in ("A", "B", "C")
    })
    ctx = ProjectContext(root=tmp_path, engine=MockEngine(tmp_path), loader=loader)
    save_manifest(
        Manifest(contents=[ModuleDescriptor(filename=f"m/{n}.py") for n in ("A", "B", "C")]),
        ctx.manifest_file,
    )
    return ctx


class TestPlanModules:
    def test_plan_in_manifest_order(self, three_modules):
        planned = plan_modules(three_modules, 31337)
        assert [p.module.id for p in planned] == ["A", "B", "C"]

    def test_plan_fails_on_unresolvable(self, three_modules):
        three_modules.loader.discard(f"{three_modules.root}{os.sep}m/B.py")
        with pytest.raises(ModuleImportError):
            plan_modules(three_modules, 31337)


class TestRunModules:
    def test_deploys_in_order(self, three_modules):
        report = run_modules(three_modules)
        assert three_modules.engine.call_log == [
            ("deploy", "A"),
            ("deploy", "B"),
            ("deploy", "C"),
        ]
        assert report.executed == report.total == 3
        assert report.complete
        assert report.contracts_deployed == 3

    def test_reset_happens_before_first_deploy(self, three_modules):
        report = run_modules(three_modules, reset=True, deploy_args=DeployArgs(deployment_id="dep-1"))
        assert three_modules.engine.call_log[0] == ("reset", "dep-1")
        assert [op for op, _ in three_modules.engine.call_log[1:]] == ["deploy"] * 3
        assert report.reset

    def test_no_reset_without_flag(self, three_modules):
        run_modules(three_modules)
        assert all(op == "deploy" for op, _ in three_modules.engine.call_log)

    def test_unresolvable_module_aborts_before_any_deploy(self, three_modules):
        three_modules.loader.discard(f"{three_modules.root}{os.sep}m/C.py")
        with pytest.raises(ModuleImportError):
            run_modules(three_modules, reset=True)
        assert three_modules.engine.call_log == []

    def test_engine_error_propagates_and_aborts(self, three_modules):
        three_modules.engine.set_failure("B", "nonce too low")
        report = ExecutionReport(operation_id="op-1")

        with pytest.raises(EngineError, match="nonce too low"):
            run_modules(three_modules, report=report)

        assert [op_subject[1] for op_subject in three_modules.engine.call_log] == ["A", "B"]
        assert report.executed == 1
        assert not report.complete

    def test_rerun_after_failure_resumes(self, three_modules):
        engine = three_modules.engine
        engine.set_failure("B")
        with pytest.raises(EngineError):
            run_modules(three_modules)

        engine.reset()
        report = run_modules(three_modules)

        assert report.outcomes[0].skipped == ["A#Main"]
        assert report.outcomes[0].deployed == {}
        assert list(report.outcomes[1].deployed) == ["B#Main"]
        assert list(report.outcomes[2].deployed) == ["C#Main"]

    def test_args_passed_through(self, three_modules):
        args = DeployArgs(deployment_id="custom", parameters={"A": {"unlockTime": 1}})
        report = run_modules(three_modules, deploy_args=args)
        assert report.deployment_id == "custom"
        assert all(o.deployment_id == "custom" for o in report.outcomes)

    def test_empty_manifest(self, tmp_path: Path):
        engine = MockEngine(tmp_path)
        ctx = ProjectContext(root=tmp_path, engine=engine, loader=StaticModuleLoader())

        report = run_modules(ctx, reset=True)

        assert report.total == 0
        assert not report.reset
        assert engine.call_log == []

    def test_chain_provider_selects_variant(self, three_modules):
        three_modules.loader.add(f"{three_modules.root}{os.sep}m/B-137.py", _module("BPolygon"))
        three_modules.chain_id_provider = lambda: 137

        report = run_modules(three_modules)
        assert [p.module.id for p in report.planned] == ["A", "BPolygon", "C"]
        assert report.chain_id == 137

    def test_report_to_dict(self, three_modules):
        data = run_modules(three_modules).to_dict()
        assert data["total"] == 3
        assert data["modules"][0] == {"filename": "m/A.py", "external": False, "module_id": "A"}
        assert data["outcomes"][2]["module_id"] == "C"


class TestOperationId:
    def test_format_and_uniqueness(self):
        a, b = generate_operation_id(), generate_operation_id()
        assert a.startswith("run-")
        assert a != b
