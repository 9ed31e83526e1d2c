"""
CLI Main for lifehooks
=======================
Typer-based CLI running the lifecycle hooks of a configuration file.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import DEFAULT_CONFIG_FILE, ConfigError, RunnerConfig, load_config
from ..hooks import HookError, Lifecycle, service_hooks
from ..launcher import Launcher
from ..utils import LogConfig, setup_logging

# Console for Rich output
console = Console()

app = typer.Typer(
    name="lifehooks",
    help="lifehooks - Test runner lifecycle hook orchestration",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich"
)


class AppState:
    """Global application state"""
    verbose: bool = False


state = AppState()


def version_callback(value: bool):
    """Print version and exit"""
    if value:
        from .. import __version__
        console.print(f"lifehooks v{__version__}")
        raise typer.Exit()


def _load(config_file: Path) -> RunnerConfig:
    try:
        config = load_config(config_file)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2)

    setup_logging(
        config=LogConfig(
            level=config.log_level,
            log_dir=config.log_dir,
            log_file=config.log_file,
            enable_file=config.log_dir is not None or config.log_file is not None
        ),
        verbose=state.verbose
    )
    return config


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output"
    ),
    version: bool = typer.Option(
        None,
        "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
):
    """
    lifehooks - run onPrepare, onWorkerStart and onComplete hooks.

    [dim]Examples:[/dim]
        lifehooks run lifehooks.yaml       # Run every lifecycle point
        lifehooks show lifehooks.yaml      # List configured hooks
    """
    state.verbose = verbose


@app.command()
def run(
    config_file: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILE),
        help="Path to the YAML configuration"
    ),
    exit_code: int = typer.Option(
        0,
        "--exit-code", "-e",
        help="Exit code of the test run passed to onComplete hooks"
    )
):
    """Run the lifecycle hooks of a configuration"""
    config = _load(config_file)
    logger = logging.getLogger(__name__)

    try:
        launcher = Launcher(config)
        code = asyncio.run(launcher.run(exit_code=exit_code))
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2)
    except HookError as e:
        logger.debug("Runner stopped by a hook", exc_info=e)
        console.print(Panel(
            str(e).strip(),
            title=f"Hook error in '{e.origin}'",
            border_style="red"
        ))
        raise typer.Exit(1)

    if code:
        console.print(f"[yellow]Finished with exit code {code}[/yellow]")
    else:
        console.print("[green]All lifecycle hooks finished[/green]")
    raise typer.Exit(code)


@app.command()
def show(
    config_file: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILE),
        help="Path to the YAML configuration"
    )
):
    """Show the hooks and services of a configuration"""
    config = _load(config_file)

    table = Table(title=f"Hooks in {config_file}", border_style="blue")
    table.add_column("Lifecycle", style="bold")
    table.add_column("#", justify="right")
    table.add_column("Source")
    table.add_column("Reference")
    table.add_column("Callable")

    try:
        services = config.resolved_services()
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2)

    for lifecycle in Lifecycle:
        refs = config.hook_references(lifecycle)
        for index, (ref, hook) in enumerate(zip(refs, config.resolved_hooks(lifecycle))):
            table.add_row(lifecycle.value, str(index), "config", str(ref), _mark(hook))
        for index, hook in enumerate(service_hooks(services, lifecycle.value)):
            if hook is None:
                continue
            name = type(services[index]).__name__
            table.add_row(lifecycle.value, str(index), "service", name, _mark(hook))

    if not table.row_count:
        console.print("[dim]No hooks configured.[/dim]")
        return

    console.print(table)


def _mark(hook) -> str:
    return "[green]yes[/green]" if callable(hook) else "[yellow]skipped[/yellow]"


def main_entry():
    """Entry point for the CLI"""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")
        sys.exit(130)


if __name__ == "__main__":
    main_entry()
