"""
Repository management for Keysmith.

Handles the keysmith_repositories table. A repository's creator
automatically receives full access to it.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ..audit.models import AuditAction, ResourceType
from ..errors import KeysmithError
from ..utils.logging import get_logger
from .models import CreateRepositoryRequest, Repository

if TYPE_CHECKING:
    from ..client import Keysmith

log = get_logger(__name__)


class RepositoryManager:
    """
    Manager for repository CRUD operations.

    Example:
        ```python
        repo = await keysmith.repositories.create("Mobile app", created_by=user.id)
        repos = await keysmith.repositories.list_for_user(user.id)
        ```
    """

    def __init__(self, keysmith: "Keysmith") -> None:
        """
        Initialize RepositoryManager.

        Args:
            keysmith: Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client

    async def create(self, name: str, created_by: UUID) -> Repository:
        """
        Create a repository and grant its creator full access.

        Args:
            name: Repository display name
            created_by: ID of the creating user

        Returns:
            Created Repository
        """
        request = CreateRepositoryRequest(name=name, created_by=created_by)

        now = datetime.now(timezone.utc).isoformat()
        result = await self.client.table("keysmith_repositories").insert({
            "name": request.name,
            "created_by": str(request.created_by),
            "created_at": now,
            "updated_at": now,
        }).execute()

        if not result.data:
            raise KeysmithError("Failed to create repository")

        repository = Repository(**result.data[0])

        await self.keysmith.permissions.grant_full_access(created_by, repository.id)
        await self.keysmith.audit.log(
            action=AuditAction.REPOSITORY_CREATED,
            user_id=created_by,
            repository_id=repository.id,
            resource_type=ResourceType.REPOSITORY,
            resource_id=repository.id,
            metadata={"name": repository.name},
        )
        log.info(
            "repository_created",
            repository_id=str(repository.id),
            created_by=str(created_by),
        )
        return repository

    async def get(self, repository_id: UUID) -> Optional[Repository]:
        """Get a repository by ID, or None."""
        result = await self.client.table("keysmith_repositories").select("*").eq(
            "id", str(repository_id)
        ).execute()

        if not result.data:
            return None

        return Repository(**result.data[0])

    async def list_for_user(self, user_id: UUID) -> List[Repository]:
        """List repositories the user holds any permission on."""
        permissions = await self.client.table("keysmith_permissions").select(
            "repository_id"
        ).eq("user_id", str(user_id)).execute()

        repositories = []
        for row in permissions.data:
            repository = await self.get(UUID(row["repository_id"]))
            if repository:
                repositories.append(repository)
        return repositories
