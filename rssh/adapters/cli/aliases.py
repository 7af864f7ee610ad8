"""
Alias management commands: add, list, remove
"""
import typer
from rich.markup import escape

from ...core.exceptions import RsshError
from ...core.logging import get_logger, get_stdout_console
from .connection import create_alias_store, create_vault
from .utils import report_error

logger = get_logger(__name__)
console = get_stdout_console()


def add_run(
    alias: str = typer.Argument(..., help="A unique alias for the connection"),
    connection_string: str = typer.Argument(..., help="Connection string in user@host format"),
) -> None:
    """
    Add a new SSH connection.

    Examples:
        rssh add box alice@10.0.0.1
    """
    try:
        create_alias_store().add(alias, connection_string)
    except RsshError as e:
        report_error(e)

    logger.info("Alias '%s' -> %s saved", alias, connection_string)
    console.print(f"Connection '{escape(alias)}' added.")


def list_run() -> None:
    """List all saved SSH connections."""
    try:
        connections = create_alias_store().load()
    except RsshError as e:
        report_error(e)

    if not connections:
        console.print("No connections saved. Use 'rssh add <alias> <user@host>' to add one.")
        return

    console.print("Saved connections:")
    for alias, connection_string in sorted(connections.items()):
        console.print(f"  {escape(alias)} -> {escape(connection_string)}")


def remove_run(
    alias: str = typer.Argument(..., help="The alias of the connection to remove"),
) -> None:
    """
    Remove a saved SSH connection and its stored password.

    The alias is removed first; if the keychain entry cannot be deleted
    afterwards the command still fails.
    """
    try:
        create_alias_store().remove(alias)
        create_vault().delete_secret(alias)
    except RsshError as e:
        report_error(e)

    logger.info("Alias '%s' removed", alias)
    console.print(f"Connection '{escape(alias)}' removed.")


def register_alias_commands(app: typer.Typer) -> None:
    """Register alias commands on the main app"""
    app.command(name="add")(add_run)
    app.command(name="list")(list_run)
    app.command(name="remove")(remove_run)
