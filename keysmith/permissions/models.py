"""
Keysmith permission models.

Repository-level permissions and the API key scopes each one allows.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List
from uuid import UUID

from pydantic import BaseModel

from ..apikeys.models import ApiScope


class PermissionType(str, Enum):
    """Repository permission levels, weakest first."""

    VIEW = "view"
    TRANSLATE = "translate"
    EDIT = "edit"
    MANAGE = "manage"

    @property
    def power(self) -> int:
        return _ORDER.index(self)

    def includes(self, other: "PermissionType") -> bool:
        """True if this level is at least as strong as ``other``."""
        return self.power >= other.power

    @property
    def scopes(self) -> FrozenSet[ApiScope]:
        """API key scopes a holder of this permission may grant."""
        return SCOPES_BY_PERMISSION[self]


_ORDER: List[PermissionType] = [
    PermissionType.VIEW,
    PermissionType.TRANSLATE,
    PermissionType.EDIT,
    PermissionType.MANAGE,
]

SCOPES_BY_PERMISSION: Dict[PermissionType, FrozenSet[ApiScope]] = {
    PermissionType.VIEW: frozenset({ApiScope.TRANSLATIONS_VIEW}),
    PermissionType.TRANSLATE: frozenset({
        ApiScope.TRANSLATIONS_VIEW,
        ApiScope.TRANSLATIONS_EDIT,
    }),
    PermissionType.EDIT: frozenset({
        ApiScope.TRANSLATIONS_VIEW,
        ApiScope.TRANSLATIONS_EDIT,
        ApiScope.KEYS_EDIT,
    }),
    PermissionType.MANAGE: frozenset(ApiScope),
}


class RepositoryPermission(BaseModel):
    """
    A user's permission on one repository (keysmith_permissions table).

    There is at most one row per (user, repository).
    """

    id: UUID
    user_id: UUID
    repository_id: UUID
    type: PermissionType

    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e7890-e89b-12d3-a456-426614174000",
                "repository_id": "789e0123-e89b-12d3-a456-426614174000",
                "type": "manage",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }
