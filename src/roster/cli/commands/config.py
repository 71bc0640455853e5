"""Config command for roster CLI."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from roster.cli.app import app
from roster.config import RosterSettings
from roster.exceptions import RosterError
from roster.schemas import ConfigBlock
from roster.services import RosterService

console = Console(highlight=False)


@app.command()
def config(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory holding the roster file."),
    file_name: Optional[str] = typer.Option(
        None, "--file", "-f", help="Roster file name (default: .roster.yml)."
    ),
) -> None:
    """Show the configuration block of a directory's roster file."""
    settings: RosterSettings = ctx.obj or RosterSettings()
    if file_name is not None:
        try:
            settings = RosterSettings(**{**settings.model_dump(), "roster_file_name": file_name})
        except ValidationError as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(125)

    service = RosterService(settings)
    try:
        roster = service.load(directory)
    except RosterError as e:
        logger.error(f"Error reading roster: {e}")
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(125)

    block = ConfigBlock.from_scan_config(roster.config)
    text = yaml.safe_dump({"config": block.model_dump()}, sort_keys=False)
    if not roster.exists:
        console.print(f"# no roster file at {roster.path}, showing defaults", markup=False)
    console.print(Syntax(text, "yaml", background_color="default"))
