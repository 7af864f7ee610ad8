"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ... import __version__
from ...core.constants import APP_NAME
from ...core.logging import setup_logging, get_logger, get_stdout_console
from .aliases import register_alias_commands
from .connect import interactive_run, register_connect_command
from .transfer import register_transfer_commands

logger = get_logger(__name__)
console = get_stdout_console()

# Create main app
app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    help="A secure SSH login management tool",
    invoke_without_command=True,
    rich_markup_mode="rich",
)

register_alias_commands(app)
register_connect_command(app)
register_transfer_commands(app)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    rssh - SSH connection manager

    Save aliases for user@host targets, then open a shell or move files:
    - add / list / remove: manage saved connections
    - connect: interactive shell
    - upload / download: single-file SFTP transfer

    Run without a subcommand to pick a saved connection interactively.
    """
    setup_logging(level=log_level, log_file=log_file)

    if ctx.invoked_subcommand is None:
        interactive_run()


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
