"""
deploy-everything — CLI entrypoint.

Usage:
    python -m deploy_everything.main --help
    python -m deploy_everything.main add --module ignition/modules/Lock.py
    python -m deploy_everything.main list
    python -m deploy_everything.main run --network polygon
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from deploy_everything import __version__
from deploy_everything.core.observability.logging_config import resolve_level, setup_logging

MODULE_SUFFIX = ".py"


@click.group()
@click.version_option(version=__version__, prog_name="deploy-everything")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to everything.yml (default: auto-detect).",
)
@click.option("--network", "-n", default=None, help="Target network (default: from config).")
@click.option("--mock", is_flag=True, help="Use the mock engine (no real deployment).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    network: str | None,
    mock: bool,
) -> None:
    """deploy-everything — manage and run the full deployment of a project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["session"] = {"network": network, "mock_mode": mock}

    setup_logging(
        level=resolve_level(debug, verbose, quiet, os.environ.get("EVERYTHING_LOG_LEVEL")),
        log_file=os.environ.get("EVERYTHING_LOG_FILE"),
        log_file_level=os.environ.get("EVERYTHING_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


def _valid_module(value: str) -> bool:
    return value.strip().endswith(MODULE_SUFFIX)


def _module_argument(module: str | None, external: bool, non_interactive: bool) -> str:
    """Return a usable module path, prompting for one when needed."""
    if module is not None and _valid_module(module):
        return module.strip()

    if module is not None:
        click.secho(f"Invalid given module file: {module}", fg="yellow", err=True)
    if non_interactive:
        raise click.UsageError(f"A valid --module ending in {MODULE_SUFFIX} is required.")

    def _check(value: str) -> str:
        if not _valid_module(value):
            raise click.BadParameter(f"Invalid module file: {value}")
        return value.strip()

    prompt = "Package-relative Python file" if external else "Project-relative Python file"
    return click.prompt(prompt, default="path/to/file.py", value_proc=_check)


def _module_options(fn):
    fn = click.option(
        "--non-interactive",
        is_flag=True,
        help="Fail instead of prompting when --module is missing or invalid.",
    )(fn)
    fn = click.option(
        "--external",
        is_flag=True,
        help="The module comes from an installed package (package/path/file.py).",
    )(fn)
    fn = click.option("--module", "-m", default=None, help="The module file.")(fn)
    return fn


def _finish(result, as_json: bool, success: str) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)
    click.secho(f"✅ {success}", fg="green")


@cli.command()
@_module_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def add(ctx: click.Context, module: str | None, external: bool, non_interactive: bool, as_json: bool) -> None:
    """Add a module at the end of the full deployment."""
    from deploy_everything.core.use_cases.manage import add_module

    module = _module_argument(module, external, non_interactive)
    result = add_module(module, external, ctx.obj.get("config_path"), **ctx.obj["session"])
    _finish(result, as_json, "The module was successfully added to the full deployment.")


@cli.command()
@_module_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(ctx: click.Context, module: str | None, external: bool, non_interactive: bool, as_json: bool) -> None:
    """Remove a module from the full deployment."""
    from deploy_everything.core.use_cases.manage import remove_module

    module = _module_argument(module, external, non_interactive)
    result = remove_module(module, external, ctx.obj.get("config_path"), **ctx.obj["session"])
    _finish(result, as_json, "The module was successfully removed from the full deployment.")


@cli.command()
@_module_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, module: str | None, external: bool, non_interactive: bool, as_json: bool) -> None:
    """Check whether a module is added to the full deployment."""
    from deploy_everything.core.use_cases.manage import check_module

    module = _module_argument(module, external, non_interactive)
    result = check_module(module, external, ctx.obj.get("config_path"), **ctx.obj["session"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.registered:
        click.secho("The module is added to the full deployment.", fg="green")
    else:
        click.secho("The module is not added to the full deployment.", fg="yellow")


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List the modules of the full deployment, in deployment order."""
    from deploy_everything.core.use_cases.manage import list_modules

    result = list_modules(ctx.obj.get("config_path"), **ctx.obj["session"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.modules:
        click.echo("There are no modules added to the full deployment.")
        return

    click.secho(
        f"\n📋 Full deployment — {result.network} (chain {result.chain_id})",
        fg="cyan",
        bold=True,
    )
    for entry in result.modules:
        prefix = "External file" if entry.external else "Project file"
        click.echo(f"   • {prefix}: {entry.filename}")
        if entry.module_results:
            click.echo(f"     Results: {{{', '.join(entry.module_results)}}}")
    click.echo()


@cli.command()
@click.option("--parameters", "parameters_file", default=None, help="JSON file with module parameters.")
@click.option("--strategy", default="basic", show_default=True, help="Deployment strategy.")
@click.option("--deployment-id", default=None, help="Deployment id (default: chain-<chainId>).")
@click.option("--default-sender", default=None, help="Default sender account.")
@click.option("--reset", is_flag=True, help="Wipe the deployment journal before deploying.")
@click.option("--verify", is_flag=True, help="Verify the deployment once all modules ran.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    parameters_file: str | None,
    strategy: str,
    deployment_id: str | None,
    default_sender: str | None,
    reset: bool,
    verify: bool,
    as_json: bool,
) -> None:
    """Deploy every module of the full deployment, in order.

    Examples:

        deploy-everything run

        deploy-everything --network polygon run --deployment-id polygon-v2

        deploy-everything run --reset --parameters params.json
    """
    from deploy_everything.core.use_cases.run import run_everything

    result = run_everything(
        config_path=ctx.obj.get("config_path"),
        parameters_file=parameters_file,
        strategy=strategy,
        deployment_id=deployment_id,
        default_sender=default_sender,
        reset=reset,
        verify=verify,
        **ctx.obj["session"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    report = result.report
    if report is not None:
        mode_label = "[reset] " if report.reset else ""
        click.secho(
            f"\n⚡ {mode_label}Full deployment — {result.network} (chain {report.chain_id})",
            fg="cyan",
            bold=True,
        )
        for index, planned in enumerate(report.planned):
            if index < report.executed:
                outcome = report.outcomes[index]
                click.secho(f"   ✓ {planned.module.id}", fg="green", nl=False)
                click.echo(f"  ({len(outcome.deployed)} deployed, {len(outcome.skipped)} journaled)")
                if ctx.obj.get("verbose"):
                    for contract_id, address in outcome.deployed.items():
                        click.echo(f"     │ {contract_id} → {address}")
            elif index == report.executed and result.error:
                click.secho(f"   ✗ {planned.module.id}", fg="red")
            else:
                click.secho(f"   ⊘ {planned.module.id}", fg="yellow")
        click.echo()

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert report is not None
    if not report.planned:
        click.echo("There are no modules added to the full deployment.")
        return

    click.secho(
        f"   Result: {report.executed}/{report.total} modules, "
        f"{report.contracts_deployed} new contracts",
        fg="green",
        bold=True,
    )
    if result.verified:
        click.secho("   Verification requested", fg="green")
    click.echo()


# ── Register sub-command groups from ui/cli/ ──────────────────────

from deploy_everything.ui.cli.deployed import deployed  # noqa: E402
from deploy_everything.ui.cli.history import history  # noqa: E402

cli.add_command(deployed)
cli.add_command(history)


if __name__ == "__main__":
    cli()
