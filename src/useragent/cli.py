"""Command line interface for UserAgent."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from useragent import __version__
from useragent.config import DEFAULT_OUTPUT_PATH, DebugLevel, get_settings
from useragent.core.types import SessionOutcome
from useragent.logging_utils import configure_logging
from useragent.personas import PERSONA_PRESETS
from useragent.runner import RunOptions, RunResult, run_test

app = typer.Typer(
    name="useragent",
    help="Simulate real human users to discover UX blind spots.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

_DEBUG_ALIASES: dict[str, DebugLevel] = {
    "off": "off",
    "false": "off",
    "debug": "debug",
    "true": "debug",
    "ultra": "ultra",
}


def parse_credentials(value: str | None) -> dict[str, str]:
    """Parse `key=value,key=value`; pairs without `=` are ignored and values may contain `=`."""
    credentials: dict[str, str] = {}
    if not value:
        return credentials
    for pair in value.split(","):
        key, sep, raw = pair.partition("=")
        if key.strip() and sep:
            credentials[key.strip()] = raw.strip()
    return credentials


def parse_debug(value: str) -> DebugLevel:
    level = _DEBUG_ALIASES.get(value.strip().lower())
    if level is None:
        raise typer.BadParameter("expected one of: off, debug, ultra")
    return level


def _print_summary(result: RunResult, output: str) -> None:
    report = result.report
    table = Table(title="Session complete", show_header=False)
    table.add_row("Outcome", str(report.outcome))
    table.add_row("Steps executed", str(report.summary.total_steps))
    table.add_row("Intuitiveness score", f"{report.summary.intuitiveness_score}/10")
    table.add_row("Issues found", str(len(result.json.issues)))
    table.add_row("Cost", f"${report.cost.total_cost_usd:.4f} ({report.cost.total_cost_czk:.2f} CZK)")
    table.add_row("Report", output)
    if report.video_path:
        table.add_row("Video", report.video_path)
    if report.error:
        table.add_row("Error", report.error)
    console.print(table)


@app.command()
def run(
    url: str = typer.Option(..., "--url", help="Target URL to test"),
    persona: str = typer.Option(..., "--persona", help="Natural language user description or preset name"),
    intent: str | None = typer.Option(None, "--intent", help="What the user wants to achieve"),
    explore: bool = typer.Option(False, "--explore", help="Exploratory mode without a specific intent"),
    steps: int | None = typer.Option(None, "--steps", min=1, help="Maximum number of steps"),
    timeout: int | None = typer.Option(None, "--timeout", min=1, help="Session timeout in seconds"),
    wait: float | None = typer.Option(None, "--wait", min=0, help="Wait between actions in seconds"),
    credentials: str | None = typer.Option(None, "--credentials", help='Login credentials as "key=value,key=value"'),
    output: str = typer.Option(DEFAULT_OUTPUT_PATH, "--output", help="Markdown report path"),
    json_output: str | None = typer.Option(None, "--json-output", help="JSON report path"),
    debug: str = typer.Option("off", "--debug", help="Debug level: off, debug or ultra"),
    budget: float | None = typer.Option(None, "--budget", min=0, help="Maximum cost in CZK"),
    llm: str | None = typer.Option(None, "--llm", help="LLM provider: republic or claude-cli"),
) -> None:
    """Run one persona session against a URL and write the reports."""
    settings = get_settings()
    level = parse_debug(debug)
    configure_logging(level="DEBUG" if level != "off" else settings.log_level, profile="cli")
    console.print(f"UserAgent v{__version__}")

    options = RunOptions(
        url=url,
        persona=persona,
        intent=intent,
        explore=explore,
        max_steps=steps,
        timeout=timeout,
        wait_between_actions=wait,
        budget_czk=budget,
        credentials=parse_credentials(credentials),
        llm=llm,
        debug=level,
        markdown_path=output,
        json_path=json_output,
    )
    result = asyncio.run(run_test(options, settings=settings))
    _print_summary(result, output)
    if result.report.outcome is SessionOutcome.FAILED:
        raise typer.Exit(1)


@app.command()
def personas() -> None:
    """List persona presets usable as --persona values."""
    table = Table(title="Persona presets")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Description")
    for key, preset in PERSONA_PRESETS.items():
        table.add_row(key, preset.name, preset.description)
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),  # noqa: S104
    port: int = typer.Option(3000, "--port", help="Bind port"),
) -> None:
    """Start the HTTP session server."""
    import uvicorn

    from useragent.server.api import create_app

    settings = get_settings()
    configure_logging(level=settings.log_level)
    uvicorn.run(create_app(settings), host=host, port=port)
