"""Prompt optimization CLI commands."""

import json
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from ...core.exceptions import ClavixError
from ...core.types import DocumentType, OptimizationMode, OptimizationPhase
from ...intelligence.optimizer import ContextOverride, OptimizationResult, UniversalOptimizer
from ...workspace import Workspace
from .common import console, current_settings, quality_table, read_prompt


def prompt_options(func):
    """Input and output options shared by the optimization commands."""
    func = click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")(func)
    func = click.option("-v", "--verbose", is_flag=True, help="Show escalation reasons and improvements")(func)
    func = click.option("--save", is_flag=True, help="Save the result to .clavix/outputs/prompts")(func)
    func = click.option("-f", "--file", "input_file", type=click.Path(exists=True), help="Read prompt from file")(func)
    func = click.argument("prompt", required=False)(func)
    return func


def run_optimization(
    ctx: click.Context,
    mode: OptimizationMode,
    prompt: Optional[str],
    input_file: Optional[str],
    save: bool,
    verbose: bool,
    as_json: bool,
    override: Optional[ContextOverride] = None
) -> OptimizationResult:
    settings = current_settings(ctx)
    text = read_prompt(prompt, input_file)
    save = save or settings.intelligence.save_prompts
    verbose = verbose or settings.intelligence.show_escalation_reasons

    optimizer = UniversalOptimizer()
    result = optimizer.optimize(text, mode, override)

    saved = None
    if save:
        try:
            workspace = Workspace(".", settings.workspace, version=settings.version)
            saved = workspace.save_prompt(result)
        except ClavixError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

    # JSON output stays a single parseable document
    if as_json:
        data = result.to_dict()
        if mode is OptimizationMode.FAST:
            data["escalation"] = optimizer.analyze_escalation(result).to_dict()
        if saved is not None:
            data["saved_to"] = str(saved.path)
        click.echo(json.dumps(data, indent=2))
    else:
        _print_result(optimizer, result, verbose)
        if saved is not None:
            console.print(f"[green]Saved to:[/green] {saved.path}")

    return result


def _print_result(optimizer: UniversalOptimizer, result: OptimizationResult, verbose: bool) -> None:
    console.print(Panel(
        f"Intent: [green]{result.intent.primary_intent.value}[/green] "
        f"({result.intent.confidence}% confidence)  Mode: [cyan]{result.mode.value}[/cyan]",
        title="Clavix",
    ))
    click.echo(result.enhanced)
    console.print(quality_table(result.quality))

    if result.applied_patterns:
        console.print("\n[bold]Applied Patterns:[/bold]")
        for pattern in result.applied_patterns:
            console.print(f"  - {pattern.name} ({pattern.impact.value}): {pattern.description}")

    if verbose and result.quality.suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for suggestion in result.quality.suggestions:
            console.print(f"  - {suggestion}")

    recommendation = optimizer.get_detailed_recommendation(result)
    escalation = recommendation.escalation
    if escalation is not None and escalation.should_escalate:
        console.print(f"\n[bold yellow]Recommendation:[/bold yellow] {recommendation.message}")
    else:
        message = optimizer.get_recommendation(result)
        if message:
            console.print(f"\n[bold]{message}[/bold]")

    if verbose and escalation is not None:
        table = Table(title=f"Escalation score {escalation.escalation_score} ({escalation.escalation_confidence})")
        table.add_column("Factor", style="cyan")
        table.add_column("Points", justify="right")
        table.add_column("Reason")
        for reason in escalation.reasons:
            table.add_row(reason.factor, str(reason.contribution), reason.description)
        console.print(table)


@click.command()
@prompt_options
@click.pass_context
def fast(ctx, prompt, input_file, save, verbose, as_json):
    """Quickly optimize a prompt.

    Recommends deep mode when the prompt would benefit from it.

    Examples:

        clavix fast "Build a login page"

        clavix fast -f prompt.txt -v
    """
    run_optimization(ctx, OptimizationMode.FAST, prompt, input_file, save, verbose, as_json)


@click.command()
@prompt_options
@click.pass_context
def deep(ctx, prompt, input_file, save, verbose, as_json):
    """Thoroughly optimize a prompt.

    Adds steps, scope, success criteria and edge cases where missing.

    Example:

        clavix deep "Build a login page with email and password"
    """
    run_optimization(ctx, OptimizationMode.DEEP, prompt, input_file, save, verbose, as_json)


@click.command()
@prompt_options
@click.option(
    "--phase",
    type=click.Choice([p.value for p in OptimizationPhase]),
    default=OptimizationPhase.OUTPUT_GENERATION.value,
    help="PRD workflow phase"
)
@click.option(
    "--document",
    "document_type",
    type=click.Choice([d.value for d in DocumentType]),
    default=DocumentType.FULL_PRD.value,
    help="Kind of document being produced"
)
@click.pass_context
def prd(ctx, prompt, input_file, save, verbose, as_json, phase, document_type):
    """Shape product notes into a PRD.

    Example:

        clavix prd -f notes.md --document quick-prd
    """
    override = ContextOverride(
        intent="prd-generation",
        phase=OptimizationPhase(phase),
        document_type=DocumentType(document_type),
    )
    run_optimization(ctx, OptimizationMode.PRD, prompt, input_file, save, verbose, as_json, override)


@click.command()
@prompt_options
@click.pass_context
def summarize(ctx, prompt, input_file, save, verbose, as_json):
    """Extract requirements from a conversation.

    Example:

        clavix summarize -f transcript.txt
    """
    override = ContextOverride(phase=OptimizationPhase.SUMMARIZATION)
    run_optimization(ctx, OptimizationMode.CONVERSATIONAL, prompt, input_file, save, verbose, as_json, override)


@click.command()
@prompt_options
@click.option(
    "-m", "--mode",
    type=click.Choice([m.value for m in OptimizationMode]),
    default=None,
    help="Optimization mode (default from CLAVIX_DEFAULT_MODE)"
)
@click.pass_context
def optimize(ctx, prompt, input_file, save, verbose, as_json, mode):
    """Optimize a prompt in any mode.

    Example:

        clavix optimize "Plan the billing migration" --mode deep
    """
    settings = current_settings(ctx)
    resolved = OptimizationMode.parse(mode or settings.intelligence.default_mode) or OptimizationMode.FAST
    run_optimization(ctx, resolved, prompt, input_file, save, verbose, as_json)


@click.command()
@click.argument("prompt", required=False)
@click.option("-f", "--file", "input_file", type=click.Path(exists=True), help="Read prompt from file")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON")
def analyze(prompt, input_file, as_json):
    """Analyze a prompt without modifying it.

    Shows intent detection and quality scores.

    Example:

        clavix analyze "Your prompt here..."
    """
    from ...intelligence.analyzers import IntentDetector, QualityAssessor

    text = read_prompt(prompt, input_file)
    intent = IntentDetector().analyze(text)
    quality = QualityAssessor().assess_quality(text, intent)

    if as_json:
        click.echo(json.dumps({"intent": intent.to_dict(), "quality": quality.to_dict()}, indent=2))
        return

    console.print("\n[bold]Intent Detection:[/bold]")
    console.print(f"  Primary: [green]{intent.primary_intent.value}[/green]")
    console.print(f"  Confidence: [cyan]{intent.confidence}%[/cyan]")
    for secondary, score in intent.secondary_intents:
        console.print(f"  Also: {secondary.value} (score {score})")

    flags = [name for name, value in vars(intent.characteristics).items() if value]
    if flags:
        console.print(f"  Characteristics: {', '.join(flags)}")

    console.print(quality_table(quality))

    if quality.strengths:
        console.print("\n[bold green]Strengths:[/bold green]")
        for strength in quality.strengths:
            console.print(f"  - {strength}")
    if quality.suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for suggestion in quality.suggestions:
            console.print(f"  - {suggestion}")


@click.command("validate-answer")
@click.argument("answer")
@click.option(
    "-q", "--question",
    default="q1",
    show_default=True,
    help="PRD question id (q1-q5)"
)
@click.option("--json", "as_json", is_flag=True, help="Print the validation as JSON")
def validate_answer(answer, question, as_json):
    """Check whether a PRD question answer is specific enough.

    Example:

        clavix validate-answer "idk" --question q1
    """
    validation = UniversalOptimizer().validate_prd_answer(answer, question)

    if as_json:
        click.echo(json.dumps(validation.to_dict(), indent=2))
        return

    if validation.needs_clarification:
        console.print(f"[yellow]Needs clarification[/yellow] (quality {validation.quality}): {validation.suggestion}")
    else:
        console.print(f"[green]Looks good[/green] (quality {validation.quality})")
