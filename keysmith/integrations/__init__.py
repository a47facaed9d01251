"""
Keysmith framework integrations.
"""

from .fastapi import get_keysmith, register_error_handlers, require_user

__all__ = ["get_keysmith", "register_error_handlers", "require_user"]
