"""
File-based alias storage implementation
"""
import json
from pathlib import Path
from typing import Dict, Optional

from ...core.constants import ALIAS_FILE_NAME, DEFAULT_CONFIG_DIR
from ...core.exceptions import AliasNotFoundError, ConfigError
from ...core.interfaces import AliasStore
from ...core.utils import split_connection_string


class JsonAliasStore(AliasStore):
    """
    JSON alias storage.

    Stores every alias in a single document:
    - {config_dir}/config.json - {"connections": {alias: "user@host"}}
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize alias store.

        Args:
            config_dir: Directory holding config.json
        """
        if config_dir is None:
            config_dir = Path(DEFAULT_CONFIG_DIR)

        self.config_dir = Path(config_dir).expanduser()
        self.path = self.config_dir / ALIAS_FILE_NAME

    def load(self) -> Dict[str, str]:
        """Load aliases; a missing file is an empty mapping"""
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read config file {self.path}: {e}") from e

        connections = data.get("connections", {}) if isinstance(data, dict) else None
        if not isinstance(connections, dict):
            raise ConfigError(f"Failed to parse config file {self.path}: 'connections' must be an object")
        return {str(k): str(v) for k, v in connections.items()}

    def save(self, connections: Dict[str, str]) -> None:
        """Write aliases, creating the config directory if needed"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps({"connections": connections}, indent=2, sort_keys=True),
                encoding='utf-8',
            )
        except OSError as e:
            raise ConfigError(f"Failed to write config file {self.path}: {e}") from e

    # --------------------
    # Record operations
    # --------------------
    def add(self, alias: str, connection_string: str) -> None:
        """Add or replace an alias after validating user@host"""
        split_connection_string(connection_string)
        connections = self.load()
        connections[alias] = connection_string
        self.save(connections)

    def get(self, alias: str) -> str:
        connections = self.load()
        if alias not in connections:
            raise AliasNotFoundError(alias)
        return connections[alias]

    def remove(self, alias: str) -> str:
        """
        Remove an alias.

        Returns:
            The connection string that was removed

        Raises:
            AliasNotFoundError: Unknown alias; the file is left untouched
        """
        connections = self.load()
        if alias not in connections:
            raise AliasNotFoundError(alias)
        removed = connections.pop(alias)
        self.save(connections)
        return removed
