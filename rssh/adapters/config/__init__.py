"""
Configuration loading
"""
from .loader import ConfigLoader, RsshConfig, load_config

__all__ = [
    "ConfigLoader",
    "RsshConfig",
    "load_config",
]
