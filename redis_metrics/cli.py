"""Command-line interface for the redis-metrics agent."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import settings
from .agent import AgentConfig, CollectorAgent, ConfigError, run_agent
from .utils import get_logger, setup_logging

app = typer.Typer(
    name="redis-metrics",
    help="Collect Redis INFO statistics and push them to open-falcon",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def load_config(path: Optional[Path]) -> AgentConfig:
    """Load the agent config file plus env overrides, exiting with status 1 on failure."""
    path = path or settings.config_file
    try:
        config = AgentConfig.from_yaml(str(path)).apply_env()
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {path}[/red]")
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]Invalid config {path}: {e}[/red]")
        raise typer.Exit(1)

    level = "DEBUG" if config.debug else config.log_level
    setup_logging(level, config.log_file)
    return config


def _version_callback(value: bool):
    if value:
        console.print(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Redis metrics agent."""


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Run the collection loop until interrupted."""
    agent_config = load_config(config)
    logger.info(f"Starting redis-metrics {__version__}")
    run_agent(agent_config)


@app.command()
def collect(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
    send: bool = typer.Option(False, "--send", help="Also push the batch to the transfer"),
):
    """Run a single collection cycle and print the metrics."""
    agent_config = load_config(config)
    agent = CollectorAgent(agent_config)

    async def once():
        try:
            if send:
                return await agent.run_cycle()
            return await agent.collect_once()
        finally:
            await agent.sender.close()

    batch = asyncio.run(once())
    if batch is None:
        console.print("[red]Cycle skipped: hostname could not be resolved[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Metrics for {batch.host}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Type")
    table.add_column("Tags")

    for m in batch.metrics:
        table.add_row(m.metric, m.value, m.counter_type.value, m.tags)

    console.print(table)
    console.print(f"\n{len(batch)} metrics from {len(agent.addrs)} nodes")


@app.command()
def version():
    """Show version."""
    console.print(__version__)


if __name__ == "__main__":
    app()
