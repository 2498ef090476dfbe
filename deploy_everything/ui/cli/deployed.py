"""
CLI commands for inspecting deployed contracts.

Thin wrappers over ``deploy_everything.core.use_cases.deployed``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def deployed() -> None:
    """Deployed — contracts recorded in a deployment journal."""


@deployed.command("contracts")
@click.option("--deployment-id", default=None, help="Deployment id (default: chain-<chainId>).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def contracts(ctx: click.Context, deployment_id: str | None, as_json: bool) -> None:
    """List deployed contract ids and their addresses."""
    from deploy_everything.core.use_cases.deployed import deployed_contracts

    result = deployed_contracts(deployment_id, ctx.obj.get("config_path"), **ctx.obj["session"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"\n📦 {result.deployment_id}", fg="cyan", bold=True)
    if not result.addresses:
        click.echo("   No contracts deployed.")
    for contract_id, address in result.addresses.items():
        click.echo(f"   • {contract_id}  → {address}")
    click.echo()


@deployed.command("show")
@click.argument("contract_id")
@click.option("--deployment-id", default=None, help="Deployment id (default: chain-<chainId>).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, contract_id: str, deployment_id: str | None, as_json: bool) -> None:
    """Show the address and interface of one deployed contract."""
    from deploy_everything.core.use_cases.deployed import deployed_contract

    result = deployed_contract(
        contract_id, deployment_id, ctx.obj.get("config_path"), **ctx.obj["session"]
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"\n📄 {contract_id}", fg="cyan", bold=True)
    click.echo(f"   Deployment: {result.deployment_id}")
    click.echo(f"   Address:    {result.address}")

    functions = result.interface.function_names()
    events = result.interface.event_names()
    if functions:
        click.echo(f"   Functions:  {', '.join(functions)}")
    if events:
        click.echo(f"   Events:     {', '.join(events)}")
    click.echo()
