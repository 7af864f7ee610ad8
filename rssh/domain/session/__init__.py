"""
Session domain module
"""
from .models import KeyAuthState, PasswordAuthState, parse_connection_target
from .auth import KeyAuthenticator, PasswordAuthenticator
from .builder import SessionBuilder

__all__ = [
    "KeyAuthState",
    "PasswordAuthState",
    "parse_connection_target",
    "KeyAuthenticator",
    "PasswordAuthenticator",
    "SessionBuilder",
]
