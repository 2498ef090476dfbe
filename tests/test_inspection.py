"""
Tests for inspection — deployed contracts and contract handles.
"""

import json

import pytest

from deploy_everything.core.errors import (
    CorruptedContractError,
    DeploymentDataError,
    NotDeployedError,
)
from deploy_everything.core.models.deployment import ContractHandle, DeployArgs
from deploy_everything.core.persistence.journal import addresses_path, artifact_path
from deploy_everything.core.services.inspection import (
    deployed_addresses,
    effective_deployment_id,
    list_deployed_contracts,
    resolve_contract_handle,
)
from deploy_everything.core.services.registry import add_module
from deploy_everything.core.engine.executor import run_modules

from conftest import SAMPLE_ABI


def _journal(ctx, deployment_id: str, addresses: dict, artifacts: dict | None = None) -> None:
    path = addresses_path(ctx.root, deployment_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(addresses))
    for contract_id, artifact in (artifacts or {}).items():
        target = artifact_path(ctx.root, deployment_id, contract_id)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(artifact))


class TestDeploymentId:
    def test_defaults_to_chain(self, ctx):
        assert effective_deployment_id(ctx) == "chain-31337"

    def test_explicit(self, ctx):
        assert effective_deployment_id(ctx, "staging") == "staging"


class TestListDeployedContracts:
    def test_lists_in_journal_order(self, ctx):
        _journal(ctx, "chain-31337", {"M#B": "0x02", "M#A": "0x01"})
        assert list_deployed_contracts(ctx) == ["M#B", "M#A"]

    def test_explicit_deployment(self, ctx):
        _journal(ctx, "staging", {"M#A": "0x01"})
        assert list_deployed_contracts(ctx, "staging") == ["M#A"]
        assert deployed_addresses(ctx, "staging") == {"M#A": "0x01"}

    def test_missing_file_is_an_error(self, ctx):
        with pytest.raises(DeploymentDataError) as exc:
            list_deployed_contracts(ctx)
        assert "chain-31337" in str(exc.value)

    def test_unparseable_file_is_an_error(self, ctx):
        path = addresses_path(ctx.root, "chain-31337")
        path.parent.mkdir(parents=True)
        path.write_text("{oops")
        with pytest.raises(DeploymentDataError):
            list_deployed_contracts(ctx)


class TestResolveContractHandle:
    def test_handle(self, ctx):
        _journal(ctx, "chain-31337", {"M#Lock": "0xabc"}, {"M#Lock": {"abi": SAMPLE_ABI}})

        handle = resolve_contract_handle(ctx, None, "M#Lock")

        assert isinstance(handle, ContractHandle)
        assert handle.address == "0xabc"
        assert handle.function_names() == ["withdraw"]

    def test_not_deployed(self, ctx):
        _journal(ctx, "chain-31337", {"M#Lock": "0xabc"})
        with pytest.raises(NotDeployedError):
            resolve_contract_handle(ctx, None, "M#Other")

    @pytest.mark.parametrize("address", [None, "", 0])
    def test_blank_address_is_not_deployed(self, ctx, address):
        _journal(ctx, "chain-31337", {"M#Lock": address}, {"M#Lock": {"abi": SAMPLE_ABI}})
        with pytest.raises(NotDeployedError):
            resolve_contract_handle(ctx, None, "M#Lock")
        assert list_deployed_contracts(ctx) == []

    def test_missing_artifact(self, ctx):
        _journal(ctx, "chain-31337", {"M#Lock": "0xabc"})
        with pytest.raises(CorruptedContractError):
            resolve_contract_handle(ctx, None, "M#Lock")

    @pytest.mark.parametrize("artifact", [{}, {"abi": []}, {"abi": "nope"}])
    def test_unusable_abi(self, ctx, artifact):
        _journal(ctx, "chain-31337", {"M#Lock": "0xabc"}, {"M#Lock": artifact})
        with pytest.raises(CorruptedContractError):
            resolve_contract_handle(ctx, None, "M#Lock")

    def test_missing_deployment(self, ctx):
        with pytest.raises(DeploymentDataError):
            resolve_contract_handle(ctx, "nowhere", "M#Lock")


class TestAfterRun:
    def test_handle_after_run_is_stable(self, ctx):
        add_module(ctx, "ignition/modules/Lock.py")

        run_modules(ctx)
        first = resolve_contract_handle(ctx, None, "LockModule#Lock")
        second_report = run_modules(ctx)
        second = resolve_contract_handle(ctx, None, "LockModule#Lock")

        assert second_report.contracts_deployed == 0
        assert first.address == second.address
        assert list_deployed_contracts(ctx) == ["LockModule#Lock"]

    def test_named_deployment(self, ctx):
        add_module(ctx, "ignition/modules/Lock.py")
        run_modules(ctx, deploy_args=DeployArgs(deployment_id="v2"))

        assert list_deployed_contracts(ctx, "v2") == ["LockModule#Lock"]
        with pytest.raises(DeploymentDataError):
            list_deployed_contracts(ctx)
