"""Helpers shared by the CLI commands."""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...core.config import Settings, get_settings
from ...intelligence.analyzers.quality_assessor import QualityScore

console = Console()


def read_prompt(prompt: Optional[str], input_file: Optional[str]) -> str:
    """Prompt from the argument, a file, or stdin. Aborts when empty."""
    if input_file:
        with open(input_file) as f:
            prompt = f.read()
    elif not prompt:
        prompt = click.get_text_stream("stdin").read()

    if not prompt or not prompt.strip():
        console.print("[red]Error:[/red] No prompt provided")
        raise click.Abort()
    return prompt


def current_settings(ctx: click.Context) -> Settings:
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and "settings" in obj:
        return obj["settings"]
    return get_settings()


def quality_table(quality: QualityScore, title: str = "Quality") -> Table:
    table = Table(title=title)
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")

    for dimension, score in quality.dimensions().items():
        color = "green" if score >= 75 else "yellow" if score >= 50 else "red"
        table.add_row(dimension.value.capitalize(), f"[{color}]{score}[/{color}]")
    table.add_row("[bold]Overall[/bold]", f"[bold]{quality.overall}[/bold] ({quality.rating.value})")
    return table
