"""Command line entry point for the agent catalog."""
import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from core.config import config
from core.exceptions import AgentNotFoundError
from core.registry import AGENTS, list_agents, run_agent
from utils.log_config import setup_logging
from utils.tracing import setup_langsmith_tracing

# Initialize Typer app
app = typer.Typer(
    name="Agent Catalog",
    help="Run task-specific LLM agents from the command line",
    add_completion=False
)

# Initialize Rich console
console = Console()

EXAMPLES: Dict[str, Dict[str, Any]] = {
    "translator": {"text": "Hello, how are you?", "target_language": "spanish"},
    "sql_generator": {
        "question": "Which customers placed more than 5 orders last month?",
        "schema": "customers(id, name), orders(id, customer_id, created_at)",
    },
    "regex_generator": {"requirement": "Match US ZIP codes with an optional +4 suffix"},
    "market_watch": {"symbol": "BTCUSDT"},
    "workflow_builder": {"trigger": "New row added to the leads spreadsheet"},
    "youtube_finder": {"query": "linear algebra lectures", "sort_by": "viewCount"},
}


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """`key=value` pairs; values that parse as JSON keep their type."""
    values: Dict[str, Any] = {}
    for assignment in assignments:
        if "=" not in assignment:
            raise typer.BadParameter(f"Expected key=value, got {assignment!r}")
        key, raw = assignment.split("=", 1)
        try:
            values[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            values[key.strip()] = raw
    return values


def load_input(input_json: Optional[str], input_file: Optional[Path], assignments: List[str]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if input_file:
        if not input_file.exists():
            console.print(f"[red]Error: Input file {input_file} not found[/red]")
            raise typer.Exit(1)
        data.update(json.loads(input_file.read_text()))
    if input_json:
        data.update(json.loads(input_json))
    data.update(parse_assignments(assignments))
    return data


@app.command()
def run(
    slug: str = typer.Argument(..., help="Agent slug (see `list`)"),
    input_json: Optional[str] = typer.Option(
        None,
        "--input", "-j",
        help="Agent input as a JSON object"
    ),
    input_file: Optional[Path] = typer.Option(
        None,
        "--input-file", "-i",
        help="Read the agent input from a JSON file"
    ),
    assignments: List[str] = typer.Option(
        [],
        "--set", "-s",
        help="Set one input field, as key=value (repeatable)"
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file", "-o",
        help="Save the result envelope to a file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logging and the input"
    ),
    trace: bool = typer.Option(
        False,
        "--trace",
        help="Send traces to LangSmith"
    )
):
    """Run one agent and print its result envelope."""
    setup_logging("DEBUG" if verbose else None)

    if slug not in AGENTS:
        console.print(f"[red]Unknown agent: {slug}[/red]")
        console.print("Run `list` to see the available agents.")
        raise typer.Exit(1)

    try:
        input_data = load_input(input_json, input_file, assignments)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: input is not valid JSON: {e}[/red]")
        raise typer.Exit(1)

    if trace:
        try:
            setup_langsmith_tracing()
        except ValueError as e:
            console.print(f"[yellow]Tracing disabled: {e}[/yellow]")

    if verbose:
        console.print(Panel(JSON(json.dumps(input_data, default=str)), title="Input", border_style="blue"))

    try:
        with console.status(f"[bold green]Running {slug}...", spinner="dots"):
            envelope = asyncio.run(run_agent(slug, input_data))
    except AgentNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    rendered = json.dumps(envelope, indent=2, default=str)
    if envelope.get("success"):
        console.print(Panel(JSON(rendered), title=f"{slug}: success", border_style="green"))
    else:
        console.print(Panel(envelope.get("error") or "Unknown error", title=f"{slug}: failed", border_style="red"))

    if output_file:
        output_file.write_text(rendered)
        console.print(f"\n[green]Output saved to {output_file}[/green]")

    if not envelope.get("success"):
        raise typer.Exit(1)


@app.command("list")
def list_command():
    """List every agent in the catalog."""
    table = Table(title="Agents", show_header=True)
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("Provider", style="magenta")
    table.add_column("Model", style="dim")
    table.add_column("Description")

    for info in list_agents():
        table.add_row(info.slug, info.name, info.provider, info.model_name, info.description)

    console.print(table)


@app.command()
def example(
    slug: str = typer.Argument(
        "translator",
        help="Agent to show an example input for"
    )
):
    """Show an example input for an agent."""
    if slug in EXAMPLES:
        payload = json.dumps(EXAMPLES[slug], indent=2)
        console.print(Panel(
            f"{payload}\n\n[dim]python main.py run {slug} --input '{json.dumps(EXAMPLES[slug])}'[/dim]",
            title=f"Example: {slug}",
            border_style="blue"
        ))
    else:
        console.print(f"[red]No example for: {slug}[/red]")
        console.print("Available examples: " + ", ".join(EXAMPLES))


@app.command()
def test(
    live: bool = typer.Option(
        False,
        "--live",
        help="Also run the translator agent against the configured provider"
    )
):
    """Check which services are configured."""
    console.print("[bold]Checking agent catalog setup...[/bold]\n")

    checks = [
        ("GROQ_API_KEY", bool(config.providers.groq_api_key), "Groq agents"),
        ("GEMINI_API_KEY", bool(config.providers.gemini_api_key), "Gemini agents"),
        ("OPENAI_API_KEY", bool(config.providers.openai_api_key), "OpenAI agents, speech and images"),
        ("YOUTUBE_API_KEY", bool(config.youtube.api_key), "youtube_finder"),
        ("SMTP_HOST / SMTP_USER / SMTP_PASS", config.smtp.configured, "email_gen delivery"),
        ("LANGSMITH_API_KEY", bool(os.getenv("LANGSMITH_API_KEY")), "tracing"),
    ]

    table = Table(title="Environment", show_header=True)
    table.add_column("Variable", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Used by")
    for name, is_set, used_by in checks:
        table.add_row(name, "✓ Set" if is_set else "[red]✗ Not set[/red]", used_by)
    console.print(table)

    if not any(is_set for _, is_set, _ in checks[:3]):
        console.print("\n[red]No LLM provider key is configured![/red]")
        console.print("Please copy .env.example to .env and fill in your API keys.")
        raise typer.Exit(1)

    if not live:
        return

    console.print("\n[bold]Running test translation...[/bold]")
    setup_logging()
    envelope = asyncio.run(run_agent("translator", EXAMPLES["translator"]))
    if envelope["success"]:
        console.print(f"[green]✓ Test passed: {envelope['translation']['translated_text']}[/green]")
    else:
        console.print(f"[red]✗ Test failed: {envelope['error']}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
