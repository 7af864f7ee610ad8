"""
Transfer CLI commands: upload, download
"""
import typer
from pathlib import Path
from typing import Optional

from rich.markup import escape

from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import RsshError
from ...core.logging import get_logger, get_stdout_console
from ...core.utils import format_size
from ...domain.transfer import TransferEngine, check_download_destination, check_upload_source
from ..config import load_config
from .connection import open_session
from .progress import TransferProgress
from .utils import report_error

logger = get_logger(__name__)
stdout_console = get_stdout_console()


def upload_run(
    alias: str = typer.Argument(..., help="The alias of the connection to use"),
    local_path: Path = typer.Argument(..., help="Local file to upload"),
    remote_dir: str = typer.Argument(..., help="Remote directory to save the file in"),
    port: int = typer.Option(
        DEFAULT_SSH_PORT, "--port", "-p", min=1, max=65535, help="The port to connect to"
    ),
    identity: Optional[Path] = typer.Option(
        None, "--identity", "-i", help="Path to the private key file"
    ),
) -> None:
    """
    Upload a file to a remote directory.

    Examples:
        rssh upload box ./report.txt /home/alice/in
    """
    try:
        source = check_upload_source(local_path)
        config = load_config()

        with open_session(alias, port, identity, config) as session:
            engine = TransferEngine(session, chunk_size=config.chunk_size)
            stdout_console.print(f"Uploading {escape(str(source))} to {escape(remote_dir)}...")
            with TransferProgress("Uploading", stdout_console) as progress:
                descriptor = engine.upload(source, remote_dir, progress_callback=progress)
    except RsshError as e:
        report_error(e)

    stdout_console.print(
        f"[green]✓[/green] Upload complete: {escape(descriptor.remote_path)} "
        f"({format_size(descriptor.bytes_transferred)})"
    )


def download_run(
    alias: str = typer.Argument(..., help="The alias of the connection to use"),
    remote_path: str = typer.Argument(..., help="Remote file to download"),
    local_dir: Path = typer.Argument(..., help="Local directory to save the file in"),
    port: int = typer.Option(
        DEFAULT_SSH_PORT, "--port", "-p", min=1, max=65535, help="The port to connect to"
    ),
    identity: Optional[Path] = typer.Option(
        None, "--identity", "-i", help="Path to the private key file"
    ),
) -> None:
    """
    Download a file to a local directory.

    Examples:
        rssh download box /var/log/syslog ./logs
    """
    try:
        # local checks before any network traffic
        check_download_destination(remote_path, local_dir)
        config = load_config()

        with open_session(alias, port, identity, config) as session:
            engine = TransferEngine(session, chunk_size=config.chunk_size)
            stdout_console.print(f"Downloading {escape(remote_path)} to {escape(str(local_dir))}...")
            with TransferProgress("Downloading", stdout_console) as progress:
                descriptor = engine.download(remote_path, local_dir, progress_callback=progress)
    except RsshError as e:
        report_error(e)

    stdout_console.print(
        f"[green]✓[/green] Download complete: {escape(str(descriptor.local_path))} "
        f"({format_size(descriptor.bytes_transferred)})"
    )


def register_transfer_commands(app: typer.Typer) -> None:
    """Register transfer commands on the main app"""
    app.command(name="upload")(upload_run)
    app.command(name="download")(download_run)
