"""Main CLI entry point."""

import click

from ..core.config import get_settings
from ..core.logging_config import setup_logging
from .commands import (
    fast,
    deep,
    prd,
    summarize,
    optimize,
    analyze,
    validate_answer,
    init,
    prompts,
    list_integrations,
)
from .commands.common import console


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug):
    """Clavix - turn rough requests into structured prompts.

    \b
    Examples:
        clavix fast "Build a login page"
        clavix deep "Migrate our API from REST to GraphQL"
        clavix prd -f notes.md
        clavix summarize -f transcript.txt
        clavix analyze "Check this prompt"

    Use --help on any command for more details.
    """
    settings = get_settings()
    logging_settings = settings.logging
    if debug:
        logging_settings = logging_settings.model_copy(update={"debug": True})
    setup_logging(logging_settings)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# Optimization commands
cli.add_command(fast)
cli.add_command(deep)
cli.add_command(prd)
cli.add_command(summarize)
cli.add_command(optimize)

# Analysis commands
cli.add_command(analyze)
cli.add_command(validate_answer)

# Workspace commands
cli.add_command(init)
cli.add_command(prompts)
cli.add_command(list_integrations)


@cli.command()
@click.pass_context
def version(ctx):
    """Show the Clavix version."""
    click.echo(f"clavix {ctx.obj['settings'].version}")


@cli.command()
@click.pass_context
def info(ctx):
    """Show pattern statistics."""
    from rich.panel import Panel
    from ..intelligence import UniversalOptimizer

    stats = UniversalOptimizer().get_statistics()
    info_text = (
        f"[bold]Clavix[/bold] - prompt intelligence\n\n"
        f"  Patterns: [cyan]{stats['total_patterns']}[/cyan]\n"
        f"  Fast mode: [cyan]{stats['fast_mode_patterns']}[/cyan]\n"
        f"  Deep mode: [cyan]{stats['deep_mode_patterns']}[/cyan]"
    )
    console.print(Panel(info_text, title=f"Clavix v{ctx.obj['settings'].version}", border_style="green"))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
