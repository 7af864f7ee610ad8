"""
Configuration loader with priority: env > TOML > defaults
"""
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_SSH_TIMEOUT,
    DEFAULT_TERM,
    POLL_INTERVAL,
    SETTINGS_FILE_NAME,
    TRANSFER_CHUNK_SIZE,
)
from ...core.exceptions import ConfigError


@dataclass
class RsshConfig:
    """Runtime settings"""
    config_dir: Path = Path(DEFAULT_CONFIG_DIR).expanduser()
    timeout: float = DEFAULT_SSH_TIMEOUT
    term: str = DEFAULT_TERM
    poll_interval: float = POLL_INTERVAL
    chunk_size: int = TRANSFER_CHUNK_SIZE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RsshConfig":
        """Create from dictionary, ignoring unknown keys"""
        valid_fields = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in valid_fields}
        try:
            config = cls(**values)
            config.config_dir = Path(config.config_dir).expanduser()
            config.timeout = float(config.timeout)
            config.poll_interval = float(config.poll_interval)
            config.chunk_size = int(config.chunk_size)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        if config.chunk_size <= 0:
            raise ConfigError("chunk_size must be positive")
        if config.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive")
        return config


class ConfigLoader:
    """Configuration loader with priority support"""

    def __init__(self):
        self._env_prefix = "RSSH_"

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load TOML configuration file"""
        if not path.exists():
            return {}

        try:
            return tomllib.loads(path.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e

    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config = {}

        env_mappings = {
            "RSSH_CONFIG_DIR": "config_dir",
            "RSSH_TIMEOUT": "timeout",
            "RSSH_TERM": "term",
            "RSSH_POLL_INTERVAL": "poll_interval",
            "RSSH_CHUNK_SIZE": "chunk_size",
        }

        for env_key, config_key in env_mappings.items():
            value = os.getenv(env_key)
            if value:
                config[config_key] = value

        return config

    def load(self, use_env: bool = True, toml_path: Optional[Path] = None) -> RsshConfig:
        """
        Load configuration with priority: env > TOML > defaults

        The settings file defaults to ``<config_dir>/settings.toml``, where
        ``config_dir`` itself may come from the environment.

        Args:
            use_env: Whether to load from environment variables
            toml_path: Explicit settings file path

        Returns:
            Merged configuration
        """
        env_config = self.load_env() if use_env else {}

        if toml_path is None:
            config_dir = Path(env_config.get("config_dir", DEFAULT_CONFIG_DIR)).expanduser()
            toml_path = config_dir / SETTINGS_FILE_NAME

        merged: Dict[str, Any] = {}
        merged.update(self.load_toml(toml_path))
        merged.update(env_config)
        return RsshConfig.from_dict(merged)


def load_config() -> RsshConfig:
    """Load configuration from the default locations"""
    return ConfigLoader().load()
