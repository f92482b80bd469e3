"""Workspace CLI commands."""

import click
from rich.table import Table

from ...core.exceptions import ClavixError
from ...workspace import Workspace, detect_integrations, get_adapter, list_adapters
from .common import console, current_settings


@click.command()
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Project directory")
@click.option("-i", "--integration", "integrations", multiple=True, help="Enable an integration and generate its commands (repeatable)")
@click.option("--detect", is_flag=True, help="Also enable every integration found in the project")
@click.option(
    "--inject/--no-inject",
    default=False,
    help="Write the Clavix block into the instructions file"
)
@click.option("--instructions-file", default=None, help="File to inject into (default AGENTS.md)")
@click.pass_context
def init(ctx, root, integrations, detect, inject, instructions_file):
    """Initialize the .clavix workspace.

    Examples:

        clavix init

        clavix init -i claude-code -i cursor

        clavix init --inject --instructions-file CLAUDE.md
    """
    settings = current_settings(ctx)
    workspace = Workspace(root, settings.workspace, version=settings.version)

    try:
        requested = list(integrations)
        if detect:
            requested += [name for name in detect_integrations(root) if name not in requested]

        config = workspace.init(requested)
        console.print(f"[green]Initialized:[/green] {workspace.clavix_dir}")
        if config.integrations:
            console.print(f"  Integrations: {', '.join(config.integrations)}")
        for name in requested:
            adapter = workspace.adapter(name)
            console.print(f"  {adapter.display_name} commands: {adapter.get_command_path()}")

        if inject:
            target = workspace.inject_managed_block(
                instructions_file or settings.workspace.instructions_file,
                workspace.render_instructions(),
            )
            console.print(f"[green]Updated:[/green] {target}")
    except ClavixError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()


@click.command()
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Project directory")
@click.pass_context
def prompts(ctx, root):
    """List prompts saved in the workspace."""
    settings = current_settings(ctx)
    saved = Workspace(root, settings.workspace, version=settings.version).list_prompts()

    if not saved:
        console.print("No saved prompts.")
        return

    table = Table(title="Saved Prompts")
    table.add_column("ID", style="cyan")
    table.add_column("Mode")
    table.add_column("Intent")
    table.add_column("Quality", justify="right")

    for prompt in saved:
        table.add_row(
            prompt.id,
            prompt.metadata.get("mode", "-"),
            prompt.metadata.get("intent", "-"),
            prompt.metadata.get("quality", "-"),
        )
    console.print(table)


@click.command("integrations")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Project directory")
def list_integrations(root):
    """List the supported integrations and where their commands go."""
    detected = set(detect_integrations(root))

    table = Table(title="Integrations")
    table.add_column("Name", style="cyan")
    table.add_column("Tool")
    table.add_column("Commands")
    table.add_column("Detected")

    for name in list_adapters():
        adapter = get_adapter(name, root)
        table.add_row(
            name,
            adapter.display_name,
            adapter.config.directory,
            "yes" if name in detected else "-",
        )
    console.print(table)
