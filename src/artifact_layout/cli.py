"""CLI for artifact-layout."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .constants import CONFIG_ENV_VAR
from .context import LayoutContext
from .errors import LayoutError
from .layout import TrashSweepResult


app = typer.Typer(help="""\
Administer artifact repositories: store artifacts with checksums,
inspect digests, delete to trash, restore and empty trash.""")

console = Console()

_state = {"config": None}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", envvar=CONFIG_ENV_VAR,
        help="Path to storages.yaml",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    _state["config"] = config


def require_context() -> LayoutContext:
    """Load configuration and build the layout context.

    Raises:
        typer.Exit: If the configuration cannot be loaded
    """
    try:
        return LayoutContext.from_file(_state["config"])
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        console.print()
        console.print(f"[dim]Hint: pass --config or set {CONFIG_ENV_VAR}[/dim]")
        raise typer.Exit(1)


def _require_target(storage: Optional[str], repository: Optional[str]) -> None:
    if (storage is None) != (repository is None):
        console.print("[red]✗[/red] Give both STORAGE and REPOSITORY, or neither")
        raise typer.Exit(2)


def _print_sweep(result: TrashSweepResult, action: str) -> None:
    for key in result.processed:
        console.print(f"[green]✓[/green] {action} {key}")
    for key in result.skipped:
        console.print(f"[yellow]⚠[/yellow] Skipped {key} (policy)")
    for key in result.failed:
        console.print(f"[red]✗[/red] Failed {key}")
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def layouts():
    """List registered layout providers."""
    ctx = require_context()

    table = Table(title="Layout providers")
    table.add_column("Alias", style="cyan")
    table.add_column("Digest algorithms")
    table.add_column("Repositories")

    repositories = ctx.configuration.configuration.repositories()
    for provider in ctx.layout_registry.providers():
        keys = [r.key for r in repositories if r.layout == provider.alias]
        table.add_row(provider.alias, ", ".join(provider.digest_algorithms), ", ".join(keys) or "-")

    console.print(table)


@app.command()
def store(
    storage: str = typer.Argument(..., help="Storage id"),
    repository: str = typer.Argument(..., help="Repository id"),
    path: str = typer.Argument(..., help="Repository-relative artifact path"),
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file to upload"),
    with_checksums: bool = typer.Option(True, "--checksums/--no-checksums", help="Write checksum companion files"),
):
    """Store a file as an artifact."""
    ctx = require_context()
    try:
        provider = ctx.provider_for(storage, repository)
        with source.open("rb") as f:
            digests = provider.store(storage, repository, path, f, write_checksums=with_checksums)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Stored {storage}:{repository}/{path}")
    for algorithm, value in digests.items():
        console.print(f"  [dim]{algorithm}[/dim] {value}")


@app.command()
def checksums(
    storage: str = typer.Argument(..., help="Storage id"),
    repository: str = typer.Argument(..., help="Repository id"),
    path: str = typer.Argument(..., help="Repository-relative artifact path"),
):
    """Show the recorded checksums of an artifact."""
    ctx = require_context()
    try:
        provider = ctx.provider_for(storage, repository)
        with provider.get_input_stream(storage, repository, path) as stream:
            digests = dict(stream.digests)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"{storage}:{repository}/{path}")
    table.add_column("Algorithm", style="cyan")
    table.add_column("Digest")
    for algorithm in provider.digest_algorithms:
        table.add_row(algorithm, digests.get(algorithm, "[dim]missing[/dim]"))
    console.print(table)


@app.command()
def delete(
    storage: str = typer.Argument(..., help="Storage id"),
    repository: str = typer.Argument(..., help="Repository id"),
    path: str = typer.Argument(..., help="File or directory to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Bypass trash where the repository allows it"),
):
    """Delete a file or directory (to trash unless forced)."""
    ctx = require_context()
    try:
        ctx.provider_for(storage, repository).delete(storage, repository, path, force=force)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Deleted {storage}:{repository}/{path}")


@app.command()
def undelete(
    storage: str = typer.Argument(..., help="Storage id"),
    repository: str = typer.Argument(..., help="Repository id"),
    path: str = typer.Argument(..., help="Path to restore from trash"),
):
    """Restore a path from trash."""
    ctx = require_context()
    try:
        ctx.provider_for(storage, repository).undelete(storage, repository, path)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Restored {storage}:{repository}/{path}")


@app.command("empty-trash")
def empty_trash(
    storage: Optional[str] = typer.Argument(None, help="Storage id (all when omitted)"),
    repository: Optional[str] = typer.Argument(None, help="Repository id"),
):
    """Empty the trash of one repository, or of all repositories."""
    _require_target(storage, repository)
    ctx = require_context()
    try:
        if storage is None:
            _print_sweep(ctx.sweep_provider.delete_trash(), "Emptied trash of")
            return
        ctx.provider_for(storage, repository).delete_trash(storage, repository)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Emptied trash of {storage}:{repository}")


@app.command("restore-trash")
def restore_trash(
    storage: Optional[str] = typer.Argument(None, help="Storage id (all when omitted)"),
    repository: Optional[str] = typer.Argument(None, help="Repository id"),
):
    """Restore everything in the trash of one repository, or of all repositories."""
    _require_target(storage, repository)
    ctx = require_context()
    try:
        if storage is None:
            _print_sweep(ctx.sweep_provider.undelete_trash(), "Restored trash of")
            return
        ctx.provider_for(storage, repository).undelete_trash(storage, repository)
    except (LayoutError, OSError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Restored trash of {storage}:{repository}")


if __name__ == "__main__":
    app()
