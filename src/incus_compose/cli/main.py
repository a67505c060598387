"""Main CLI implementation using Typer."""

from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from incus_compose.cli.commands import show_order, show_summary, validate_config, write_plan
from incus_compose.errors import ComposeError
from incus_compose.models.config import DEFAULT_COMPOSE_FILE, ComposerConfig
from incus_compose.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="incus-compose",
    help="Incus Compose - declarative Incus containers and VMs",
    add_completion=False,
)

# Console for rich output
console = Console(stderr=True)


def _run_cli_command(
    handler: Callable[..., Any],
    config: str,
    log_level: str,
    verbose_script: bool = False,
    **kwargs: Any,
) -> Any:
    """Helper to run a CLI command with settings, logging and error handling."""
    try:
        settings = ComposerConfig(
            compose_file=config, log_level=log_level, verbose_script=verbose_script
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1) from e

    setup_logging(settings.log_level)
    try:
        return handler(settings, **kwargs)
    except (ComposeError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("validate")
def validate_command(
    config: str = typer.Option(
        DEFAULT_COMPOSE_FILE, "--config", "-c", envvar="INCUS_COMPOSE_FILE",
        help="Path to the incus-compose.yaml file",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Validate the configuration file."""
    if not _run_cli_command(validate_config, config=config, log_level=log_level):
        raise typer.Exit(1)


@app.command("order")
def order_command(
    config: str = typer.Option(
        DEFAULT_COMPOSE_FILE, "--config", "-c", envvar="INCUS_COMPOSE_FILE",
        help="Path to the incus-compose.yaml file",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Show the instance start order."""
    _run_cli_command(show_order, config=config, log_level=log_level)


@app.command("show")
def show_command(
    config: str = typer.Option(
        DEFAULT_COMPOSE_FILE, "--config", "-c", envvar="INCUS_COMPOSE_FILE",
        help="Path to the incus-compose.yaml file",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Summarise instances, networks, storage pools and profiles."""
    _run_cli_command(show_summary, config=config, log_level=log_level)


@app.command("plan")
def plan_command(
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the script to FILE instead of stdout"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Echo each command when the script runs"
    ),
    config: str = typer.Option(
        DEFAULT_COMPOSE_FILE, "--config", "-c", envvar="INCUS_COMPOSE_FILE",
        help="Path to the incus-compose.yaml file",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Generate incus commands without executing them."""
    _run_cli_command(
        write_plan, config=config, log_level=log_level, verbose_script=verbose, output=output
    )


def main():
    """Main entry point for CLI."""
    app()
