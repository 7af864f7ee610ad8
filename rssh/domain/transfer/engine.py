"""
SFTP file transfer engine

Streams one file between the local filesystem and the remote host through
a bounded buffer, reporting progress after every chunk.
"""
import os
import posixpath
from pathlib import Path
from typing import BinaryIO, Optional, Union

import paramiko

from ...client import TransportSession
from ...core.constants import TRANSFER_CHUNK_SIZE
from ...core.exceptions import (
    DestinationIsFileError,
    InvalidRemotePathError,
    NotAFileError,
    TransferFailedError,
)
from ...core.interfaces import ProgressCallback
from ...core.logging import get_logger
from .models import TransferDescriptor, TransferDirection

logger = get_logger(__name__)

IO_ERRORS = (OSError, EOFError, paramiko.SSHException)

PathLike = Union[str, Path]


# ============================================================
# Pre-flight checks (no network access)
# ============================================================

def check_upload_source(local_path: PathLike) -> Path:
    """
    Ensure the upload source is a regular file.

    Raises:
        NotAFileError: Missing path, directory or special file
    """
    path = Path(local_path).expanduser()
    if not path.is_file():
        raise NotAFileError(
            f"Local path '{local_path}' is not a file. Please provide a path to a file to upload."
        )
    return path


def remote_basename(remote_path: str) -> str:
    """
    File name component of a remote path.

    Raises:
        InvalidRemotePathError: Path ends in '/' or names '.' / '..'
    """
    name = posixpath.basename(str(remote_path))
    if name in ("", ".", ".."):
        raise InvalidRemotePathError(
            f"Remote path '{remote_path}' is a directory or invalid. "
            "Please provide a path to a file to download."
        )
    return name


def check_download_destination(remote_path: str, local_dir: PathLike) -> Path:
    """
    Validate a download without touching the filesystem.

    Returns:
        Local file path the download will be written to

    Raises:
        InvalidRemotePathError: Remote path has no file name
        DestinationIsFileError: local_dir is an existing file
    """
    name = remote_basename(remote_path)

    directory = Path(local_dir).expanduser()
    if directory.is_file():
        raise DestinationIsFileError(
            f"Local destination '{local_dir}' is a file. Please provide a directory path."
        )
    return directory / name


def prepare_download_directory(local_path: Path) -> None:
    """
    Create the parent directory of a download target if it is missing.

    Raises:
        TransferFailedError: Directory could not be created
    """
    try:
        local_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TransferFailedError(
            f"Failed to create local directory '{local_path.parent}': {e}"
        ) from e


# ============================================================
# Engine
# ============================================================

class TransferEngine:
    """Upload / download single files over the session's SFTP channel"""

    def __init__(self, session: TransportSession, chunk_size: int = TRANSFER_CHUNK_SIZE):
        self.session = session
        self.chunk_size = chunk_size

    def upload(
        self,
        local_path: PathLike,
        remote_dir: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> TransferDescriptor:
        """
        Upload a local file into a remote directory.

        Args:
            local_path: Local regular file
            remote_dir: Remote directory; the local base name is appended
            progress_callback: Called with (transferred, total) after each chunk

        Returns:
            Completed transfer descriptor

        Raises:
            NotAFileError: local_path is not a regular file
            TransferFailedError: Any open/read/write failure
        """
        source = check_upload_source(local_path)
        remote_path = posixpath.join(str(remote_dir), source.name)

        try:
            local_file = open(source, "rb")
        except OSError as e:
            raise TransferFailedError(f"Failed to open local file '{source}': {e}") from e

        with local_file:
            descriptor = TransferDescriptor(
                local_path=source,
                remote_path=remote_path,
                direction=TransferDirection.UPLOAD,
                total_bytes=os.fstat(local_file.fileno()).st_size,
            )
            logger.info("Uploading %s to %s (%d bytes)", source, remote_path, descriptor.total_bytes)

            sftp = self._open_sftp()
            try:
                remote_file = sftp.open(remote_path, "wb")
            except IO_ERRORS as e:
                raise TransferFailedError(f"Failed to create remote file '{remote_path}': {e}") from e

            self._stream(local_file, remote_file, descriptor, progress_callback)

        logger.info("Upload of %s complete", source)
        return descriptor

    def download(
        self,
        remote_path: str,
        local_dir: PathLike,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> TransferDescriptor:
        """
        Download a remote file into a local directory.

        Args:
            remote_path: Remote file
            local_dir: Local directory, created if missing
            progress_callback: Called with (transferred, total) after each chunk;
                total is 0 when the remote size is unknown

        Returns:
            Completed transfer descriptor

        Raises:
            InvalidRemotePathError: remote_path has no file name
            DestinationIsFileError: local_dir is an existing file
            TransferFailedError: Any open/read/write failure
        """
        local_path = check_download_destination(remote_path, local_dir)
        prepare_download_directory(local_path)

        sftp = self._open_sftp()
        try:
            remote_file = sftp.open(str(remote_path), "rb")
        except IO_ERRORS as e:
            raise TransferFailedError(f"Failed to open remote file '{remote_path}': {e}") from e

        with remote_file:
            descriptor = TransferDescriptor(
                local_path=local_path,
                remote_path=str(remote_path),
                direction=TransferDirection.DOWNLOAD,
                total_bytes=self._remote_size(remote_file),
            )
            logger.info("Downloading %s to %s (%d bytes)", remote_path, local_path, descriptor.total_bytes)

            try:
                local_file = open(local_path, "wb")
            except OSError as e:
                raise TransferFailedError(f"Failed to create local file '{local_path}': {e}") from e

            self._stream(remote_file, local_file, descriptor, progress_callback)

        logger.info("Download of %s complete", remote_path)
        return descriptor

    # --------------------
    # Helpers
    # --------------------
    def _open_sftp(self) -> paramiko.SFTPClient:
        try:
            return self.session.open_sftp()
        except IO_ERRORS as e:
            raise TransferFailedError(f"Failed to create SFTP session: {e}") from e

    def _remote_size(self, remote_file: paramiko.SFTPFile) -> int:
        try:
            size = remote_file.stat().st_size
        except IO_ERRORS as e:
            logger.debug("Remote size unavailable: %s", e)
            return 0
        return size or 0

    def _stream(
        self,
        reader: BinaryIO,
        writer: BinaryIO,
        descriptor: TransferDescriptor,
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        """Copy reader to writer chunk by chunk, closing the writer"""
        try:
            with writer:
                while True:
                    chunk = reader.read(self.chunk_size)
                    if not chunk:
                        break
                    writer.write(chunk)
                    descriptor.advance(len(chunk))
                    if progress_callback:
                        progress_callback(descriptor.bytes_transferred, descriptor.total_bytes)
        except IO_ERRORS as e:
            raise TransferFailedError(
                f"{descriptor.direction.value.capitalize()} of '{descriptor.local_path}' failed "
                f"after {descriptor.bytes_transferred} bytes: {e}"
            ) from e


def upload(
    session: TransportSession,
    local_path: PathLike,
    remote_dir: str,
    progress_callback: Optional[ProgressCallback] = None,
) -> TransferDescriptor:
    return TransferEngine(session).upload(local_path, remote_dir, progress_callback)


def download(
    session: TransportSession,
    remote_path: str,
    local_dir: PathLike,
    progress_callback: Optional[ProgressCallback] = None,
) -> TransferDescriptor:
    return TransferEngine(session).download(remote_path, local_dir, progress_callback)
