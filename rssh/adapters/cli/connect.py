"""
Interactive shell commands: connect and the no-subcommand chooser
"""
from pathlib import Path
from typing import Optional

import typer

from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import ConfigError, RsshError
from ...core.logging import get_logger, get_stdout_console
from ...core.utils import validate_port
from ...domain.shell import ShellMultiplexer
from ..config import load_config
from .connection import create_alias_store, open_session
from .prompts import RichPromptProvider
from .utils import report_error

logger = get_logger(__name__)
console = get_stdout_console()


def start_shell(alias: str, port: int, identity: Optional[Path]) -> None:
    """Open a session for an alias and hand the terminal to the remote shell"""
    config = load_config()
    session = open_session(alias, port, identity, config)
    with session:
        ShellMultiplexer(
            session,
            term=config.term,
            poll_interval=config.poll_interval,
        ).run()


def connect_run(
    alias: str = typer.Argument(..., help="The alias of the connection to use"),
    port: int = typer.Option(
        DEFAULT_SSH_PORT, "--port", "-p", min=1, max=65535, help="The port to connect to"
    ),
    identity: Optional[Path] = typer.Option(
        None, "--identity", "-i", help="Path to the private key file"
    ),
) -> None:
    """
    Connect to a server using a saved alias.

    Examples:
        rssh connect box
        rssh connect box -p 2222 -i ~/.ssh/id_ed25519
    """
    try:
        start_shell(alias, port, identity)
    except (RsshError, OSError) as e:
        report_error(e)


def interactive_run() -> None:
    """Choose a saved connection, port and identity interactively, then connect"""
    prompts = RichPromptProvider()

    try:
        aliases = sorted(create_alias_store().load())
    except RsshError as e:
        report_error(e)

    if not aliases:
        prompts.info("No connections saved. Use 'add' command first.")
        return

    choice = prompts.choose("Select a connection to open", aliases)

    port_str = prompts.prompt("Enter port", default=str(DEFAULT_SSH_PORT))
    try:
        port = validate_port(int(port_str))
    except ValueError:
        report_error(ConfigError(f"Invalid port number: {port_str}"))
    except ConfigError as e:
        report_error(e)

    identity: Optional[Path] = None
    if prompts.confirm("Use identity file (private key)?", default=False):
        identity = Path(prompts.prompt("Enter path to private key")).expanduser()

    try:
        start_shell(choice, port, identity)
    except (RsshError, OSError) as e:
        report_error(e)


def register_connect_command(app: typer.Typer) -> None:
    """Register connect command on the main app"""
    app.command(name="connect")(connect_run)
