"""
Permission management for Keysmith.

Stores repository permissions and answers access questions for the
API key endpoints.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional
from uuid import UUID

from ..apikeys.models import ApiScope
from ..audit.models import AuditAction, ResourceType
from ..errors import ForbiddenError
from ..utils.logging import get_logger
from .models import PermissionType, RepositoryPermission

if TYPE_CHECKING:
    from ..client import Keysmith

log = get_logger(__name__)


class PermissionManager:
    """
    Manager for repository permissions.

    Example:
        ```python
        keysmith = await Keysmith.create()

        await keysmith.permissions.grant_full_access(user.id, repo.id)

        if await keysmith.permissions.has_full_access(user.id, repo.id):
            keys = await keysmith.api_keys.list_by_repository(repo.id)
        ```
    """

    def __init__(self, keysmith: "Keysmith") -> None:
        """
        Initialize PermissionManager.

        Args:
            keysmith: Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client

    async def get(
        self,
        user_id: UUID,
        repository_id: UUID,
    ) -> Optional[RepositoryPermission]:
        """
        Get a user's permission on a repository.

        Returns:
            RepositoryPermission, or None if the user has no access
        """
        result = await self.client.table("keysmith_permissions").select("*").eq(
            "user_id", str(user_id)
        ).eq("repository_id", str(repository_id)).execute()

        if not result.data:
            return None

        return RepositoryPermission(**result.data[0])

    async def grant(
        self,
        user_id: UUID,
        repository_id: UUID,
        permission_type: PermissionType,
    ) -> RepositoryPermission:
        """
        Grant a permission, replacing any existing one for the pair.

        Args:
            user_id: User receiving the permission
            repository_id: Repository the permission applies to
            permission_type: Level to grant

        Returns:
            The stored RepositoryPermission
        """
        permission_type = PermissionType(permission_type)
        now = datetime.now(timezone.utc).isoformat()
        existing = await self.get(user_id, repository_id)

        if existing:
            result = await self.client.table("keysmith_permissions").update({
                "type": permission_type.value,
                "updated_at": now,
            }).eq("id", str(existing.id)).execute()
        else:
            result = await self.client.table("keysmith_permissions").insert({
                "user_id": str(user_id),
                "repository_id": str(repository_id),
                "type": permission_type.value,
                "created_at": now,
                "updated_at": now,
            }).execute()

        permission = RepositoryPermission(**result.data[0])

        await self.keysmith.audit.log(
            action=AuditAction.PERMISSION_GRANTED,
            user_id=user_id,
            repository_id=repository_id,
            resource_type=ResourceType.PERMISSION,
            resource_id=permission.id,
            metadata={"type": permission_type.value},
        )
        log.info(
            "permission_granted",
            user_id=str(user_id),
            repository_id=str(repository_id),
            type=permission_type.value,
        )
        return permission

    async def grant_full_access(
        self,
        user_id: UUID,
        repository_id: UUID,
    ) -> RepositoryPermission:
        """Grant MANAGE on a repository."""
        return await self.grant(user_id, repository_id, PermissionType.MANAGE)

    async def revoke(self, user_id: UUID, repository_id: UUID) -> None:
        """Remove a user's permission on a repository (no-op if none)."""
        existing = await self.get(user_id, repository_id)
        if not existing:
            return

        await self.client.table("keysmith_permissions").delete().eq(
            "id", str(existing.id)
        ).execute()

        await self.keysmith.audit.log(
            action=AuditAction.PERMISSION_REVOKED,
            user_id=user_id,
            repository_id=repository_id,
            resource_type=ResourceType.PERMISSION,
            resource_id=existing.id,
        )
        log.info(
            "permission_revoked",
            user_id=str(user_id),
            repository_id=str(repository_id),
        )

    async def has_full_access(self, user_id: UUID, repository_id: UUID) -> bool:
        """
        Check if a user may manage everything in a repository.

        Example:
            ```python
            if await keysmith.permissions.has_full_access(user.id, repo.id):
                ...
            ```
        """
        permission = await self.get(user_id, repository_id)
        return permission is not None and permission.type is PermissionType.MANAGE

    async def check_repository_permission(
        self,
        user_id: UUID,
        repository_id: UUID,
        required: PermissionType,
    ) -> RepositoryPermission:
        """
        Require at least ``required`` on a repository.

        Raises:
            ForbiddenError: If the user has no permission or a weaker one
        """
        permission = await self.get(user_id, repository_id)
        if permission is None or not permission.type.includes(required):
            raise ForbiddenError("Operation not permitted")
        return permission

    async def check_api_key_scopes(
        self,
        user_id: UUID,
        repository_id: UUID,
        scopes: Iterable[ApiScope],
    ) -> None:
        """
        Require that the user's permission allows every scope.

        Raises:
            ForbiddenError: If the user has no permission on the repository
                or asks for a scope their permission does not include
        """
        permission = await self.get(user_id, repository_id)
        if permission is None:
            raise ForbiddenError("Operation not permitted")

        denied = set(scopes) - permission.type.scopes
        if denied:
            raise ForbiddenError(
                "Scopes not allowed for your permission",
                details=sorted(scope.value for scope in denied),
            )
