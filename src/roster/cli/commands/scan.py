"""Scan command for roster CLI."""

import os
from pathlib import Path
from typing import Dict, List, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from roster.cli.app import app
from roster.config import RosterSettings
from roster.exceptions import RosterError
from roster.services import RosterService, ScanHandlers
from roster.sync import SyncReport

# Create rich console
console = Console(highlight=False)

# Exit status bits; an exit status of 0 means nothing changed
EXIT_NEW = 1 << 0
EXIT_MODIFIED = 1 << 1
EXIT_DELETED = 1 << 2
EXIT_ERROR = 125


def exit_code(new: int, modified: int, deleted: int) -> int:
    """Map change counts to the exit status bit set."""
    code = 0
    if new:
        code |= EXIT_NEW
    if modified:
        code |= EXIT_MODIFIED
    if deleted:
        code |= EXIT_DELETED
    return code


def display_path(path: str) -> str:
    """Printable form of a path; undecodable name bytes are shown as \\xNN escapes."""
    return escape(os.fsencode(path).decode("utf-8", "backslashreplace"))


def print_new(path: str) -> None:
    console.print(f"[green]+ {display_path(path)}[/green]")


def print_modified(path: str) -> None:
    console.print(f"[yellow]~ {display_path(path)}[/yellow]")


def print_deleted(path: str) -> None:
    console.print(f"[red]- {display_path(path)}[/red]")


def add_files_to_tree(tree: Tree, paths: List[str], style: str):
    """Add files to tree, grouped by directory."""
    # Group by directory
    by_dir: Dict[str, List[str]] = {}
    for path in sorted(paths):
        parts = path.rsplit("/", 1)
        dir_name = parts[0] if len(parts) > 1 else ""
        by_dir.setdefault(dir_name, []).append(parts[-1])

    for dir_name, files in sorted(by_dir.items()):
        branch = tree.add(f"[bold]{display_path(dir_name)}/[/bold]") if dir_name else tree
        for file_name in files:
            branch.add(f"[{style}]{display_path(file_name)}[/{style}]")


def display_changes(title: str, changes: SyncReport, target: Optional[Console] = None):
    """Display a tree summary of one directory's changes."""
    target = target or console
    tree = Tree(title)

    if changes.total_changes == 0 and not changes.errors:
        tree.add("No changes")
        target.print(Panel(tree, expand=False))
        return

    summary = []
    if changes.new:
        summary.append(f"[green]{len(changes.new)} new[/green]")
    if changes.modified:
        summary.append(f"[yellow]{len(changes.modified)} modified[/yellow]")
    if changes.deleted:
        summary.append(f"[red]{len(changes.deleted)} deleted[/red]")
    if changes.errors:
        summary.append(f"[magenta]{len(changes.errors)} unreadable[/magenta]")
    tree.add(f"Found {', '.join(summary)}")

    if changes.new:
        add_files_to_tree(tree.add("[green]New Files[/green]"), changes.new, "green")
    if changes.modified:
        add_files_to_tree(tree.add("[yellow]Modified[/yellow]"), changes.modified, "yellow")
    if changes.deleted:
        add_files_to_tree(tree.add("[red]Deleted[/red]"), changes.deleted, "red")
    if changes.errors:
        unreadable = tree.add("[magenta]Unreadable[/magenta]")
        for path, error in changes.errors.items():
            unreadable.add(f"[magenta]{display_path(path)}[/magenta]: {display_path(error)}")

    target.print(Panel(tree, expand=False))


@app.command()
def scan(
    ctx: typer.Context,
    directories: List[Path] = typer.Argument(..., help="Directories to scan."),
    file_name: Optional[str] = typer.Option(
        None, "--file", "-f", help="Roster file name (default: .roster.yml)."
    ),
    update: Optional[bool] = typer.Option(
        None, "--update/--no-update", "-u", help="Update the roster file with scan results."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show a summary tree for each directory."
    ),
) -> None:
    """Report files added, modified or deleted since the roster was last updated.

    Exit status: 1 new files, 2 modified files, 4 deleted files (combined as
    bits), 0 when nothing changed and 125 on error.
    """
    settings: RosterSettings = ctx.obj or RosterSettings()
    overrides = {}
    if file_name is not None:
        overrides["roster_file_name"] = file_name
    if update is not None:
        overrides["update"] = update
    if overrides:
        try:
            settings = RosterSettings(**{**settings.model_dump(), **overrides})
        except ValidationError as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(EXIT_ERROR)

    service = RosterService(settings)
    handlers = ScanHandlers(on_new=print_new, on_modified=print_modified, on_deleted=print_deleted)

    try:
        summary = service.take(directories, handlers)
    except RosterError as e:
        logger.error(f"Scan failed: {e}")
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)

    if verbose:
        for directory, report in summary.reports.items():
            display_changes(display_path(str(directory)), report)

    raise typer.Exit(exit_code(summary.new, summary.modified, summary.deleted))
