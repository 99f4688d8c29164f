# main.py
import asyncio
import sys
from typing import Any, Dict

import click
import yaml
from rich.console import Console
from rich.markup import escape

from engine import WizardEngine
from errors import (
    AlreadyInstalledError, FatalFinalizationError, FinalizationError, WizardError,
)
from installed import install_status
from messages import violation_text
from probes import ProbeResult
from probes.datastore import test_datastore_connection
from probes.filesystem import test_attachments_folder, test_config_writable
from settings import InstallerSettings
from state import Step
from storage.config_file import ConfigFile

console = Console()

# Answers file section for each step that takes input
ANSWER_SECTIONS = {
    Step.SITE_AND_DATASTORE: "site",
    Step.ADMIN_ACCOUNT: "admin",
    Step.ATTACHMENTS_AND_OPTIONS: "attachments",
}


def _print_probe(result: ProbeResult) -> None:
    colour = "green" if result.succeeded else "red"
    console.print(f"[{colour}]{result.status_icon}[/{colour}] {result.label}: {escape(result.message)}")


def _as_fields(section: Dict[str, Any]) -> Dict[str, str]:
    fields = {}
    for name, value in (section or {}).items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        fields[str(name)] = "" if value is None else str(value)
    return fields


@click.group()
@click.version_option(version="1.0.0", prog_name="wiki-installer")
@click.option("--root", "-r", type=click.Path(file_okay=False), envvar="WIKI_INSTALL_ROOT",
              help="Install root (or set WIKI_INSTALL_ROOT)")
@click.pass_context
def cli(ctx, root):
    """Install and configure a self-hosted wiki."""
    ctx.ensure_object(dict)
    settings = InstallerSettings.from_env(install_root=root)
    ctx.obj["settings"] = settings
    install_status.init_from_config(ConfigFile(settings.config_path))


@cli.command()
@click.pass_context
def status(ctx):
    """Show whether the wiki is installed."""
    settings = ctx.obj["settings"]
    if install_status.is_installed():
        console.print(f"[green]Installed[/green] ({settings.config_path})")
    else:
        console.print(f"[yellow]Not installed[/yellow] ({settings.config_path})")


@cli.group()
def probe():
    """Check an external resource without installing anything."""


@probe.command("config")
@click.pass_context
def probe_config(ctx):
    """Can the configuration file be written?"""
    result = test_config_writable(ctx.obj["settings"].config_path)
    _print_probe(result)
    sys.exit(0 if result.succeeded else 1)


@probe.command("datastore")
@click.option("--type", "-t", "store_type", default="sqlite", help="Data store type")
@click.argument("connection_string")
@click.pass_context
def probe_datastore(ctx, store_type, connection_string):
    """Can a connection be made to the data store?"""
    result = asyncio.run(
        test_datastore_connection(store_type, connection_string, ctx.obj["settings"])
    )
    _print_probe(result)
    sys.exit(0 if result.succeeded else 1)


@probe.command("folder")
@click.argument("path")
@click.pass_context
def probe_folder(ctx, path):
    """Does the attachments folder exist and accept files?"""
    result = test_attachments_folder(path, ctx.obj["settings"])
    _print_probe(result)
    sys.exit(0 if result.succeeded else 1)


@cli.command()
@click.argument("answers_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def install(ctx, answers_file):
    """Run every wizard step from a YAML answers file."""
    settings = ctx.obj["settings"]
    with open(answers_file) as f:
        answers = yaml.safe_load(f) or {}

    try:
        engine = WizardEngine(settings)
    except AlreadyInstalledError as e:
        console.print(f"[yellow]{escape(str(e))}[/yellow]")
        sys.exit(0)

    if answers.get("language"):
        engine.select_language(answers["language"])

    config_probe = engine.probe_config_writable()
    if not config_probe.succeeded:
        _print_probe(config_probe)

    sys.exit(asyncio.run(_run_steps(engine, answers)))


async def _run_steps(engine: WizardEngine, answers: Dict[str, Any]) -> int:
    while engine.step is not Step.COMPLETE:
        step = engine.step
        fields = _as_fields(answers.get(ANSWER_SECTIONS.get(step, ""), {}))
        if step is Step.ADMIN_ACCOUNT and "PasswordConfirmation" not in fields:
            fields["PasswordConfirmation"] = fields.get("AdminPassword", "")
        try:
            violations = await engine.advance(fields)
        except FatalFinalizationError as e:
            console.print(f"[bold red]Installation did not complete cleanly:[/bold red] {escape(str(e))}")
            console.print("Check the server logs and environment before trying again.")
            return 3
        except FinalizationError as e:
            console.print(f"[red]Installation failed ({e.stage}):[/red] {escape(str(e))}")
            return 1
        except WizardError as e:
            # lock held by another run, or the site was installed meanwhile
            console.print(f"[yellow]Installation blocked ({e.stage}):[/yellow] {escape(str(e))}")
            return 4
        if violations:
            console.print(f"[red]Step {step.name} was rejected:[/red]")
            for v in sorted(violations):
                console.print(f"  {v.field}: {violation_text(v.message_key)}")
            return 2
        console.print(f"[green]✓[/green] {step.name}")

    console.print("[bold green]Installation successful[/bold green]")
    return 0


if __name__ == "__main__":
    cli()
