"""CLI entry point for certflow.

Invoked as::

    certflow [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m certflow.cli.main

Commands
--------
resolve     Resolve the plugins for one certificate
plugins     List the plugin catalog
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from certflow.plugins.catalog import PluginCatalog

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _build_catalog() -> "PluginCatalog":
    from certflow.plugins.catalog import PluginCatalog

    catalog = PluginCatalog()
    catalog.load_entrypoints()
    return catalog


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="certflow")
def cli() -> None:
    """Staged plugin resolution for certificate issuance."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from certflow import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]certflow[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# plugins command
# ---------------------------------------------------------------------------


@cli.command(name="plugins")
@click.option(
    "--step",
    "step_name",
    type=click.Choice(["target", "validation", "order", "csr", "store", "installation"]),
    default=None,
    help="Only list plugins of this step",
)
@click.option("--admin/--no-admin", default=False, help="Evaluate as an administrator")
@click.option("--iis-version", type=int, default=0, help="Major IIS version on this host (0 = none)")
def plugins_command(step_name: str | None, admin: bool, iis_version: int) -> None:
    """List all catalog plugins and whether they are usable on this host."""
    from certflow.core.steps import Step
    from certflow.plugins.context import FactoryContext, HostEnvironment, PluginScope

    catalog = _build_catalog()
    scope = PluginScope(HostEnvironment(admin=admin, iis_version=iis_version))
    steps = [Step.parse(step_name)] if step_name else list(Step)

    table = Table(title="Plugins", show_lines=False)
    table.add_column("Step", style="bold", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Challenge", no_wrap=True)
    table.add_column("Description")
    table.add_column("Status")

    for step in steps:
        for meta in catalog.get_plugins(step):
            verdict = FactoryContext(meta, scope).disabled()
            if meta.hidden:
                status = "[dim]hidden[/dim]"
            elif verdict.unusable:
                status = f"[yellow]disabled[/yellow] {escape(verdict.reason or '')}"
            else:
                status = "[green]available[/green]"
            table.add_row(
                step.value,
                meta.name,
                meta.challenge_type or "",
                escape(meta.description),
                status,
            )

    console.print(table)


# ---------------------------------------------------------------------------
# resolve command
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@click.option("--settings", "-s", "settings_path", default=None, type=click.Path(), help="YAML settings file")
@click.option("--host", "hosts", multiple=True, required=True, help="Identifier to include (repeatable)")
@click.option("--source", default="", help="Target plugin (ignored by interactive runs)")
@click.option("--validation", default="", help="Validation plugin name")
@click.option("--validation-mode", default="", help="Validation challenge type, e.g. dns-01")
@click.option("--order", default="", help="Order plugin (interactive runs honour it only for a single host)")
@click.option("--csr", default="", help="CSR plugin (ignored by interactive runs)")
@click.option("--store", default="", help="Comma-separated store plugins")
@click.option("--installation", default="", help="Comma-separated installation plugins")
@click.option("--unattended", is_flag=True, default=False, help="Never ask; fail steps that cannot resolve")
@click.option("--advanced", is_flag=True, default=False, help="Always show menus")
@click.option("--admin/--no-admin", default=False, help="Run as if the process were elevated")
@click.option("--iis-version", type=int, default=0, help="Major IIS version on this host (0 = none)")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
def resolve_command(
    settings_path: str | None,
    hosts: tuple[str, ...],
    source: str,
    validation: str,
    validation_mode: str,
    order: str,
    csr: str,
    store: str,
    installation: str,
    unattended: bool,
    advanced: bool,
    admin: bool,
    iis_version: int,
    verbose: bool,
) -> None:
    """Resolve the plugins for one certificate covering HOSTs.

    Examples:

    \b
        certflow resolve --host example.com --host www.example.com
        certflow resolve --host '*.example.com' --validation script --validation-mode dns-01
        certflow resolve -s settings.yaml --host example.com --unattended --store pemfiles,pfxfile
    """
    from certflow.config import MainArguments, SettingsError, load_settings
    from certflow.console import RichInputService
    from certflow.core.steps import RunLevel
    from certflow.core.target import Target
    from certflow.pipeline import resolve_plan, resolve_target
    from certflow.plugins.context import HostEnvironment, PluginScope
    from certflow.resolvers import InteractiveResolver, UnattendedResolver

    _configure_logging(verbose)

    if unattended and advanced:
        err_console.print("[red]Error:[/red] --unattended and --advanced are mutually exclusive")
        sys.exit(2)

    try:
        settings = load_settings(settings_path)
    except SettingsError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    try:
        target = Target.from_hosts(list(hosts))
    except ValueError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    arguments = MainArguments(
        source=source,
        validation=validation,
        validation_mode=validation_mode,
        order=order,
        csr=csr,
        store=store,
        installation=installation,
    )
    catalog = _build_catalog()
    scope = PluginScope(HostEnvironment(admin=admin, iis_version=iis_version))

    resolver: UnattendedResolver
    if unattended:
        resolver = UnattendedResolver(catalog, settings, arguments)
    else:
        run_level = RunLevel.INTERACTIVE | (RunLevel.ADVANCED if advanced else RunLevel.NONE)
        resolver = InteractiveResolver(
            catalog,
            settings,
            arguments,
            input_service=RichInputService(console),
            run_level=run_level,
        )

    plan = resolve_plan(resolver, scope, target, source=resolve_target(resolver, scope))

    table = Table(title=f"Plan: {escape(target.friendly_name)}", show_header=True)
    table.add_column("Step", style="bold")
    table.add_column("Plugin(s)")
    for step, plugins in plan.rows():
        table.add_row(step, escape(plugins))
    console.print(table)

    if plan.validation is None:
        err_console.print("[yellow]Warning:[/yellow] no validation plugin selected")
        sys.exit(1)


if __name__ == "__main__":
    cli()
