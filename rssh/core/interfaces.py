"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional


# (bytes_transferred, total_bytes); total is 0 when unknown
ProgressCallback = Callable[[int, int], None]


class AliasStore(ABC):
    """Alias storage interface"""

    @abstractmethod
    def load(self) -> Dict[str, str]:
        """Load the alias -> connection string mapping"""
        pass

    @abstractmethod
    def save(self, connections: Dict[str, str]) -> None:
        """Persist the alias -> connection string mapping"""
        pass


class CredentialVault(ABC):
    """Per-alias secret storage interface"""

    @abstractmethod
    def get_secret(self, alias: str) -> Optional[str]:
        """Return the stored secret, or None if there is none"""
        pass

    @abstractmethod
    def set_secret(self, alias: str, secret: str) -> None:
        """Store a secret for an alias"""
        pass

    @abstractmethod
    def delete_secret(self, alias: str) -> None:
        """Delete a secret; deleting a missing secret is not an error"""
        pass


class PromptProvider(ABC):
    """User prompt interface"""

    @abstractmethod
    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input"""
        pass

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt user for confirmation"""
        pass

    @abstractmethod
    def choose(self, message: str, choices: List[str]) -> str:
        """Prompt user to pick one of the choices"""
        pass
