"""
End-to-end integration tests — full lifecycle through the CLI.

Tests the complete workflow: add → list → run → deployed → run again.
Uses Click's CliRunner so everything runs in-process.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from deploy_everything.core.persistence.run_ledger import RunLedger
from deploy_everything.core.persistence.manifest_file import default_manifest_path
from deploy_everything.main import cli

from conftest import module_source, write_module


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _run(runner: CliRunner, project_dir: Path, *args: str):
    return runner.invoke(cli, ["--config", str(project_dir / "everything.yml"), *args])


class TestFullLifecycle:
    def test_lock_lifecycle(self, runner, project_dir: Path):
        """Register, list, deploy, inspect, and re-deploy idempotently."""
        r = _run(runner, project_dir, "add", "-m", "ignition/modules/Lock.py")
        assert r.exit_code == 0, r.output

        manifest = json.loads(default_manifest_path(project_dir).read_text())
        assert manifest == {"contents": [{"filename": "ignition/modules/Lock.py", "external": False}]}

        r = _run(runner, project_dir, "list", "--json")
        assert json.loads(r.output)["modules"][0]["module_results"] == ["LockModule#Lock"]

        r = _run(runner, project_dir, "run", "--json")
        assert r.exit_code == 0, r.output
        first = json.loads(r.output)["report"]
        assert first["contracts_deployed"] == 1

        r = _run(runner, project_dir, "deployed", "show", "LockModule#Lock", "--json")
        assert r.exit_code == 0, r.output
        address = json.loads(r.output)["address"]
        assert address.startswith("0x")

        r = _run(runner, project_dir, "run", "--json")
        second = json.loads(r.output)["report"]
        assert second["contracts_deployed"] == 0
        assert second["outcomes"][0]["skipped"] == ["LockModule#Lock"]

        r = _run(runner, project_dir, "deployed", "show", "LockModule#Lock", "--json")
        assert json.loads(r.output)["address"] == address

        ledger = RunLedger.for_project(project_dir.resolve()).records()
        assert [e.status for e in ledger] == ["ok", "ok"]
        assert [e.contracts_deployed for e in ledger] == [1, 0]

    def test_missing_manifest(self, runner, project_dir: Path):
        """No manifest: nothing listed, nothing deployed, nothing reset."""
        r = _run(runner, project_dir, "list", "--json")
        assert json.loads(r.output)["modules"] == []

        r = _run(runner, project_dir, "run", "--reset", "--json")
        report = json.loads(r.output)["report"]
        assert report["total"] == 0
        assert report["reset"] is False
        assert not default_manifest_path(project_dir).exists()
        assert not (project_dir / "ignition" / "deployments").exists()

    def test_network_conditional_module(self, runner, project_dir: Path):
        """A chain-qualified variant replaces the base module on its chain only."""
        write_module(project_dir, "ignition/modules/Lock-137.py", module_source("LockRef", "Lock"))
        _run(runner, project_dir, "add", "-m", "ignition/modules/Lock.py")

        r = _run(runner, project_dir, "--network", "polygon", "run", "--json")
        polygon = json.loads(r.output)["report"]
        assert polygon["modules"][0]["module_id"] == "LockRef"
        assert polygon["deployment_id"] is None

        r = _run(runner, project_dir, "run", "--json")
        localhost = json.loads(r.output)["report"]
        assert localhost["modules"][0]["module_id"] == "LockModule"

        r = _run(runner, project_dir, "--network", "polygon", "deployed", "contracts", "--json")
        assert json.loads(r.output) == {
            "deployment_id": "chain-137",
            "contracts": {"LockRef#Lock": polygon["outcomes"][0]["deployed"]["LockRef#Lock"]},
        }

    def test_resume_after_removal_and_readd(self, runner, project_dir: Path):
        """Order follows the manifest; re-adding a module moves it last."""
        write_module(project_dir, "ignition/modules/Vault.py", module_source("VaultModule", "Vault"))
        _run(runner, project_dir, "add", "-m", "ignition/modules/Lock.py")
        _run(runner, project_dir, "add", "-m", "ignition/modules/Vault.py")
        _run(runner, project_dir, "remove", "-m", "ignition/modules/Lock.py")
        _run(runner, project_dir, "add", "-m", "ignition/modules/Lock.py")

        r = _run(runner, project_dir, "run", "--json")
        modules = [m["module_id"] for m in json.loads(r.output)["report"]["modules"]]
        assert modules == ["VaultModule", "LockModule"]


class TestMockFlag:
    def test_mock_overrides_configured_engine(self, runner, project_dir: Path):
        """--mock deploys offline even when everything.yml names a real engine."""
        config = project_dir / "everything.yml"
        config.write_text(config.read_text().replace("engine: mock", "engine: hardhat"))
        _run(runner, project_dir, "--mock", "add", "-m", "ignition/modules/Lock.py")

        r = _run(runner, project_dir, "run")
        assert r.exit_code == 1
        assert "Unknown engine 'hardhat'" in r.output

        r = _run(runner, project_dir, "--mock", "run", "--json")
        assert r.exit_code == 0, r.output
        assert json.loads(r.output)["report"]["contracts_deployed"] == 1
