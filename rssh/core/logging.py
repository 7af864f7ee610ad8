"""
Rich-based logging for rssh

Diagnostics go to stderr through a RichHandler so they never mix with the
remote shell's output on stdout. The default level is WARNING; INFO and
DEBUG trace connection, authentication and transfer milestones.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_traceback


# Shared consoles. No file is bound, so each write goes to whatever
# sys.stdout / sys.stderr currently is.
_stdout_console = Console()
_stderr_console = Console(stderr=True)

# Locals stay hidden: frames in the auth path hold passwords
install_traceback(show_locals=False, width=120)

# Libraries that log per-packet detail at INFO and below
NOISY_LOGGERS = ("paramiko",)

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _rich_handler(level: int, rich_tracebacks: bool) -> RichHandler:
    handler = RichHandler(
        console=_stderr_console,
        show_time=True,
        show_path=level <= logging.DEBUG,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setLevel(level)
    return handler


def _file_handler(log_file: Path, level: int) -> logging.FileHandler:
    log_file = Path(log_file).expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    rich_tracebacks: bool = True,
) -> None:
    """
    Configure the root logger.

    Replaces any existing root handlers with a Rich stderr handler and,
    when ``log_file`` is given, a plain-text file handler at the same
    level. Unknown level names fall back to WARNING.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; parent directories are created
        rich_tracebacks: Render exception tracebacks with Rich
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler(log_level, rich_tracebacks))

    if log_file:
        root_logger.addHandler(_file_handler(log_file, log_level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Module logger, usually ``get_logger(__name__)``"""
    return logging.getLogger(name)


def get_stdout_console() -> Console:
    """Console for user-facing output"""
    return _stdout_console


def get_stderr_console() -> Console:
    """Console for errors and log records"""
    return _stderr_console
