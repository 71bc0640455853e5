from typing import Optional

import typer

from roster.config import RosterSettings
from roster.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import roster

        typer.echo(f"roster version: {roster.__version__}")
        raise typer.Exit()


app = typer.Typer(name="roster", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Console log level (DEBUG, INFO, WARNING, ERROR).",
        envvar="ROSTER_LOG_LEVEL",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """roster - detect new, modified and deleted files since the last scan."""
    settings = RosterSettings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    ctx.obj = settings
