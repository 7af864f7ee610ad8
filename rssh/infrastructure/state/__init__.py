"""
Local state: aliases and stored credentials
"""
from .alias_store import JsonAliasStore
from .vault import KeyringVault

__all__ = [
    "JsonAliasStore",
    "KeyringVault",
]
