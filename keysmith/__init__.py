"""
Keysmith - repository-scoped API keys for a localization backend.

Example:
    ```python
    from keysmith import ApiScope, Keysmith

    keysmith = await Keysmith.create()

    # Users and repositories
    user = await keysmith.users.create("ben@example.com", name="Ben")
    repo = await keysmith.repositories.create("Mobile app", created_by=user.id)

    # Issue and edit API keys
    key = await keysmith.api_keys.create(
        user, {ApiScope.TRANSLATIONS_VIEW, ApiScope.KEYS_EDIT}, repo
    )
    await keysmith.api_keys.edit(user, key.id, {ApiScope.TRANSLATIONS_EDIT})

    # Scoped listing
    mine = await keysmith.api_keys.list_for_caller(user)
    all_for_repo = await keysmith.api_keys.list_for_repository(user, repo.id)
    ```
"""

from .apikeys import ApiKey, ApiKeyDTO, ApiKeyManager, ApiScope
from .audit import AuditAction, AuditLogEntry, AuditLogger, ResourceType
from .auth import UserAccount
from .client import Keysmith
from .config import KeysmithConfig, load_config
from .errors import (
    AuthenticationError,
    ForbiddenError,
    KeysmithError,
    NotFoundError,
    ValidationError,
)
from .permissions import PermissionManager, PermissionType
from .repositories import Repository

__version__ = "0.1.0"

__all__ = [
    # Main client
    "Keysmith",
    "KeysmithConfig",
    "load_config",
    # API keys
    "ApiKeyManager",
    "ApiKey",
    "ApiKeyDTO",
    "ApiScope",
    # Access control
    "PermissionManager",
    "PermissionType",
    # Entities
    "UserAccount",
    "Repository",
    # Audit logging
    "AuditLogger",
    "AuditLogEntry",
    "AuditAction",
    "ResourceType",
    # Errors
    "KeysmithError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
]
