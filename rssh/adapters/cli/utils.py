"""
Utility functions for CLI commands
"""
from typing import NoReturn

import typer
from rich.markup import escape

from ...core.exceptions import RsshError, SessionError
from ...core.logging import get_logger, get_stderr_console

logger = get_logger(__name__)
stderr_console = get_stderr_console()


def report_error(error: BaseException) -> NoReturn:
    """
    Print an error and end the command with exit code 1.

    Domain errors get a one-line message; anything else is logged with
    its traceback first.
    """
    if isinstance(error, SessionError):
        stderr_console.print(f"[red]Connection error:[/red] {escape(str(error))}")
    elif isinstance(error, RsshError):
        stderr_console.print(f"[red]Error:[/red] {escape(str(error))}")
    else:
        logger.exception("Unexpected error")
        stderr_console.print(f"[red]Unexpected error:[/red] {escape(str(error))}")
    raise typer.Exit(1)
