"""
Core utility functions
"""
from typing import Tuple

from .exceptions import ConfigError, InvalidConnectionStringError


# ============================================================
# Connection Strings
# ============================================================

def split_connection_string(connection_string: str) -> Tuple[str, str]:
    """
    Split ``user@host`` into its two parts.

    Raises:
        InvalidConnectionStringError: Unless there is exactly one '@'
            with a non-empty user and host around it
    """
    parts = connection_string.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidConnectionStringError(connection_string)
    return parts[0], parts[1]


def validate_port(port: int) -> int:
    """Ensure port fits in an unsigned 16-bit field"""
    if not 0 < port <= 65535:
        raise ConfigError(f"Invalid port number: {port}")
    return port


# ============================================================
# Formatting
# ============================================================

def format_size(size_bytes: int) -> str:
    """
    Format bytes to human-readable size string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string like "100 B", "1.5 MB", etc.
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
