"""
CLI command for the run history recorded in .state/runs.ndjson.

Usage::

    deploy-everything history
    deploy-everything history -n 5 --json
    deploy-everything history --deployment-id chain-137
"""

from __future__ import annotations

import json
from pathlib import Path

import click


def _resolve_project_root(ctx: click.Context) -> Path:
    """Project root from --config, the nearest everything.yml, or CWD."""
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        from deploy_everything.core.config.loader import find_project_file

        config_path = find_project_file()
    return config_path.parent.resolve() if config_path else Path.cwd()


@click.command()
@click.option("-n", "limit", type=int, default=20, show_default=True, help="Number of runs to show.")
@click.option("--deployment-id", default=None, help="Only runs of this deployment.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, deployment_id: str | None, as_json: bool) -> None:
    """Show recent runs of the full deployment."""
    from deploy_everything.core.persistence.run_ledger import RunLedger

    ledger = RunLedger.for_project(_resolve_project_root(ctx))
    records = ledger.recent(limit, deployment_id)

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        click.echo("No runs recorded yet.")
        return

    click.secho(f"\n🕘 Last {len(records)} run(s)", fg="cyan", bold=True)
    for record in records:
        icon, color = ("✅", "green") if record.status == "ok" else ("❌", "red")
        click.secho(f"   {icon} {record.operation_id}", fg=color, nl=False)
        click.echo(
            f"  {record.network} ({record.deployment_id})"
            f"  {record.modules_executed}/{len(record.modules)} modules,"
            f" {record.contracts_deployed} new contracts"
            f"{'  [reset]' if record.reset else ''}"
        )
        if record.error:
            click.echo(f"      {record.error}")
    click.echo()
