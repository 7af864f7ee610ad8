"""
Transfer data models
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict


class TransferDirection(str, Enum):
    """传输方向"""
    DOWNLOAD = "download"  # remote → local
    UPLOAD = "upload"      # local → remote


@dataclass
class TransferDescriptor:
    """One file transfer in progress"""
    local_path: Path
    remote_path: str
    direction: TransferDirection
    total_bytes: int = 0  # 0 when the size is unknown
    bytes_transferred: int = 0

    def advance(self, n: int) -> None:
        """Record n more bytes; never moves backwards"""
        if n > 0:
            self.bytes_transferred += n

    @property
    def percentage(self) -> float:
        """Progress in percent, 0 when the total is unknown"""
        if self.total_bytes <= 0:
            return 0.0
        return min(100.0, self.bytes_transferred * 100.0 / self.total_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "local_path": str(self.local_path),
            "remote_path": self.remote_path,
            "direction": self.direction.value,
            "total_bytes": self.total_bytes,
            "bytes_transferred": self.bytes_transferred,
        }
