"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import AliasStore, CredentialVault, PromptProvider, ProgressCallback
from .utils import (
    split_connection_string,
    validate_port,
    format_size,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "AliasStore",
    "CredentialVault",
    "PromptProvider",
    "ProgressCallback",
    "split_connection_string",
    "validate_port",
    "format_size",
]
