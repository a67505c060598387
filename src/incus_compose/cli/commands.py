"""Command implementations for CLI."""

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from incus_compose.core.loader import ComposeLoader
from incus_compose.core.planner import build_plan, render_script
from incus_compose.core.validator import ResolvedModel, Validator
from incus_compose.errors import ValidationFailed
from incus_compose.models.config import ComposerConfig


logger = logging.getLogger(__name__)

console = Console()


def load_resolved(settings: ComposerConfig) -> ResolvedModel:
    """Load the configured document and resolve it, raising on any error."""
    loader = ComposeLoader()
    compose = loader.load(settings.compose_file)
    return Validator().resolve(compose, source_hash=loader.source_hash)


def validate_config(settings: ComposerConfig) -> bool:
    """Validate the document and report every violation."""
    try:
        resolved = load_resolved(settings)
    except ValidationFailed as e:
        table = Table(title="Validation Errors")
        table.add_column("Kind", style="red", no_wrap=True)
        table.add_column("Path", style="cyan")
        table.add_column("Problem")

        for violation in e.violations:
            table.add_row(violation.kind, violation.path, violation.message)

        console.print(table)
        console.print(f"[red]✗[/red] {len(e.violations)} problem(s) in {settings.compose_file}")
        return False

    console.print(
        f"[green]✓[/green] {settings.compose_file} is valid "
        f"({len(resolved.start_order)} instances)"
    )
    return True


def show_order(settings: ComposerConfig):
    """Print the start order and the batches that may start together."""
    resolved = load_resolved(settings)

    table = Table(title="Start Order")
    table.add_column("#", justify="right")
    table.add_column("Instance", style="cyan")
    table.add_column("Batch", justify="right")
    table.add_column("Priority", justify="right")
    table.add_column("Depends On", style="dim")

    batch_of = {
        name: index
        for index, batch in enumerate(resolved.start_batches, start=1)
        for name in batch
    }
    for position, name in enumerate(resolved.start_order, start=1):
        container = resolved.compose.containers[name]
        table.add_row(
            str(position),
            name,
            str(batch_of[name]),
            str(container.boot_priority),
            ", ".join(container.depends_on),
        )

    console.print(table)


def show_summary(settings: ComposerConfig):
    """Print summary tables of every entity in the document."""
    resolved = load_resolved(settings)
    compose = resolved.compose

    console.print(f"Version: {compose.version}")

    table = Table(title="Containers")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Image")
    table.add_column("Networks")
    table.add_column("Profiles")
    table.add_column("Autostart")

    for name in resolved.start_order:
        container = resolved.effective[name]
        table.add_row(
            name,
            container.instance_type.value,
            f"{container.image_server}{container.image}",
            ", ".join(container.networks),
            ", ".join(container.profiles),
            "[green]●[/green]" if container.autostart else "[red]○[/red]",
        )

    console.print(table)
    console.print()

    if compose.networks:
        table = Table(title="Networks")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Config", style="dim")

        for name in sorted(compose.networks):
            network = compose.networks[name]
            config = ", ".join(f"{k}={v}" for k, v in sorted(network.config.items()))
            table.add_row(name, network.type.value, config)

        console.print(table)
        console.print()

    if compose.storage:
        table = Table(title="Storage Pools")
        table.add_column("Name", style="cyan")
        table.add_column("Driver", style="magenta")
        table.add_column("Description")

        for name in sorted(compose.storage):
            pool = compose.storage[name]
            table.add_row(name, pool.driver.value, pool.description or "")

        console.print(table)
        console.print()

    if compose.profiles:
        table = Table(title="Profiles")
        table.add_column("Name", style="cyan")
        table.add_column("Config Keys", justify="right")
        table.add_column("Devices")

        for name in sorted(compose.profiles):
            profile = compose.profiles[name]
            table.add_row(name, str(len(profile.config)), ", ".join(sorted(profile.devices)))

        console.print(table)


def write_plan(settings: ComposerConfig, output: Optional[str] = None):
    """Render the dry-run script to stdout or to an executable file."""
    resolved = load_resolved(settings)
    plan = build_plan(resolved)
    script = render_script(plan, verbose=settings.verbose_script)

    if output is None:
        sys.stdout.write(script)
        return

    path = Path(output)
    path.write_text(script)
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(f"Wrote {len(plan.steps)} commands to {path}")
    console.print(f"[green]✓[/green] Dry-run commands written to: {path}")
