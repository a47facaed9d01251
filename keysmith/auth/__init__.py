"""
Keysmith authentication module.

Handles user accounts and access-token sessions.
"""

from .models import CreateUserRequest, UserAccount
from .sessions import SessionManager
from .users import UserManager

__all__ = [
    "UserManager",
    "SessionManager",
    "UserAccount",
    "CreateUserRequest",
]
