#!/usr/bin/env python3
"""
arbwatch - Opportunity Detection Bot

Monitors crypto launch signals, sports odds and prediction markets for
opportunities and executes them in simulation.

Usage:
    python main.py run            # Start the bot (manual mode)
    python main.py run -m autonomous
    python main.py scan           # Poll every source once and show results
    python main.py config         # Show current configuration
"""

import asyncio
import sys
import time
from typing import List, Optional

import typer
from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from arbwatch.config import get_config
from arbwatch.engine.context import BotContext
from arbwatch.engine.orchestrator import create_orchestrator
from arbwatch.errors import BotError
from arbwatch.logger import setup_logging, get_logger
from arbwatch.models import Opportunity, StatusSnapshot

# Initialize
app = typer.Typer(
    name="arbwatch",
    help="Opportunity detection and simulated execution bot",
    add_completion=False,
)
console = Console()
logger = None


def setup():
    """Initialize logging and configuration."""
    global logger
    setup_logging()
    logger = get_logger("main")


def render_status(status: StatusSnapshot) -> Group:
    """Build the status panel and recent execution table."""
    monitors = Table(title="📡 Monitors", box=box.ROUNDED)
    monitors.add_column("Monitor", style="cyan")
    monitors.add_column("Running")
    monitors.add_column("Opportunities", justify="right", style="green")

    for name, running in status.monitors_running.items():
        monitors.add_row(
            name,
            "[green]yes[/green]" if running else "[red]no[/red]",
            str(status.opportunity_counts.get(name, 0)),
        )

    executions = Table(title="📜 Recent Executions", box=box.ROUNDED)
    executions.add_column("Time", style="dim")
    executions.add_column("Kind", style="cyan")
    executions.add_column("Subject")
    executions.add_column("Reason")
    executions.add_column("Status")

    for record in status.recent_executions:
        style = "red" if record.outcome_status.value == "error" else "green"
        executions.add_row(
            record.timestamp.strftime("%H:%M:%S"),
            record.kind,
            record.subject_id[:40],
            record.reason[:60],
            f"[{style}]{record.outcome_status.value}[/{style}]",
        )

    header = Panel.fit(
        f"State: [yellow]{status.state.value}[/yellow]   Mode: [cyan]{status.mode.value}[/cyan]",
        title="🤖 arbwatch",
        border_style="green" if status.is_running else "red",
    )
    return Group(header, monitors, executions)


@app.command()
def run(
    mode: str = typer.Option("manual", "--mode", "-m", help="manual or autonomous"),
    duration: float = typer.Option(0, "--duration", "-d", help="Stop after N seconds (0 = until Ctrl+C)"),
    refresh: float = typer.Option(1.0, "--refresh", help="Status refresh interval in seconds"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Start the bot.

    In manual mode opportunities are only collected; in autonomous mode the
    bot executes qualifying ones itself (simulated).
    """
    config = get_config()
    if debug:
        config.development.debug_mode = True
        config.monitoring.log_level = "DEBUG"
    setup()

    context = BotContext()
    try:
        status = context.start(mode)
    except BotError as e:
        context.close()
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    started = time.monotonic()
    try:
        with Live(render_status(status), console=console, refresh_per_second=4) as live:
            while duration <= 0 or time.monotonic() - started < duration:
                time.sleep(refresh)
                live.update(render_status(context.get_status()))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
    finally:
        console.print("[yellow]Shutting down gracefully...[/yellow]")
        context.close()


def _opportunity_table(title: str, opportunities: List[Opportunity], describe, evaluate) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Summary")
    table.add_column("Decision")

    for opportunity in opportunities:
        decision = evaluate(opportunity)
        verdict = "[green]ACT[/green]" if decision.should_act else "[dim]skip[/dim]"
        table.add_row(
            opportunity.opportunity_id[:40],
            f"{opportunity.score:.2f}" if opportunity.score is not None else "-",
            describe(opportunity)[:70],
            f"{verdict} {decision.reason}",
        )
    return table


@app.command()
def scan(
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed for the simulated sources"),
):
    """Poll every monitor once and show what was found."""
    setup()

    orchestrator = create_orchestrator(seed=seed)

    async def poll_all():
        await asyncio.gather(*(m.scan_once() for m in orchestrator.monitors.values()))

    console.print("[dim]Polling sources...[/dim]")
    asyncio.run(poll_all())

    found = 0
    for kind, monitor in orchestrator.monitors.items():
        opportunities = monitor.get_opportunities()
        found += len(opportunities)
        if not opportunities:
            console.print(f"[dim]No {kind.value} opportunities[/dim]")
            continue
        console.print(_opportunity_table(
            f"🎯 {kind.value.capitalize()} Opportunities",
            opportunities,
            monitor.describe,
            monitor.evaluate,
        ))

    console.print(f"\n[dim]Found {found} opportunities[/dim]")


@app.command()
def config():
    """Show current configuration."""
    setup()

    cfg = get_config()

    console.print(Panel.fit(
        f"[bold]Polling[/bold]\n"
        f"  Crypto Interval: {cfg.monitors.crypto_poll_interval_seconds:.0f}s\n"
        f"  Sports Interval: {cfg.monitors.sports_poll_interval_seconds:.0f}s\n"
        f"  Prediction Interval: {cfg.monitors.prediction_poll_interval_seconds:.0f}s\n"
        f"  Sports Feed: {cfg.monitors.sports_feed_url or 'simulated'}\n\n"
        f"[bold]Autonomous Mode[/bold]\n"
        f"  Evaluation Interval: {cfg.autonomous.evaluation_interval_seconds:.0f}s\n"
        f"  Crypto Min Confidence: {cfg.autonomous.crypto_min_confidence:.2f}\n"
        f"  Sports Min Profit: {cfg.autonomous.sports_min_profit_pct:.2f}%\n"
        f"  Prediction Min Profit: {cfg.autonomous.prediction_min_profit_pct:.2f}%\n\n"
        f"[bold]Costs[/bold]\n"
        f"  Centralized Fee: {cfg.fees.centralized_fee:.1%}\n"
        f"  Default Gas: {cfg.fees.default_gas_cost:.1%}\n\n"
        f"[bold]Execution[/bold]\n"
        f"  Log Capacity: {cfg.execution.execution_log_capacity}\n"
        f"  Debug Mode: {'Yes' if cfg.development.debug_mode else 'No'}",
        title="⚙️ Configuration",
        border_style="blue",
    ))


@app.command()
def version():
    """Show version information."""
    from arbwatch import __version__

    console.print(Panel.fit(
        f"[bold]arbwatch[/bold]\n"
        f"Version: {__version__}\n"
        f"Python: {sys.version.split()[0]}",
        border_style="blue",
    ))


if __name__ == "__main__":
    app()
