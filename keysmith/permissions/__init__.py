"""
Keysmith permissions module.

Repository-level access control.
"""

from .models import SCOPES_BY_PERMISSION, PermissionType, RepositoryPermission
from .permissions import PermissionManager

__all__ = [
    "PermissionManager",
    "PermissionType",
    "RepositoryPermission",
    "SCOPES_BY_PERMISSION",
]
