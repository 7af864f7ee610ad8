"""
rssh - SSH connection manager

Provides a small CLI around saved connections, supporting:
- Aliases for user@host targets
- Password (stored in the system keyring) and key authentication
- Interactive remote shell on the local terminal
- Single-file SFTP upload and download with progress
"""

__version__ = "1.0.0"

# Export core components
from .client import TransportSession, ConnectionTarget, load_private_key
from .core.exceptions import RsshError

# Export domain services
from .domain.session import SessionBuilder
from .domain.shell import ShellMultiplexer, run_shell
from .domain.transfer import TransferEngine, TransferDescriptor, upload, download

__all__ = [
    # Version
    "__version__",
    # Client
    "TransportSession",
    "ConnectionTarget",
    "load_private_key",
    "RsshError",
    # Domain
    "SessionBuilder",
    "ShellMultiplexer",
    "run_shell",
    "TransferEngine",
    "TransferDescriptor",
    "upload",
    "download",
]
