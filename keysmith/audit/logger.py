"""
Audit logging for Keysmith.

Records key and permission changes in keysmith_audit_log.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from .models import AuditAction, AuditLogEntry, ResourceType

if TYPE_CHECKING:
    from ..client import Keysmith


class AuditLogger:
    """
    Manages audit logging operations.

    Example:
        ```python
        await keysmith.audit.log(
            action=AuditAction.API_KEY_CREATED,
            user_id=user.id,
            repository_id=repo.id,
            resource_type=ResourceType.API_KEY,
            resource_id=key.id,
        )

        entries = await keysmith.audit.list_by_repository(repo.id)
        ```
    """

    def __init__(self, keysmith: "Keysmith") -> None:
        """
        Initialize AuditLogger.

        Args:
            keysmith: Main Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client
        self._enabled = keysmith.config.enable_audit_log

    def disable(self) -> None:
        """Disable audit logging (useful for bulk operations)."""
        self._enabled = False

    def enable(self) -> None:
        """Enable audit logging."""
        self._enabled = True

    @property
    def is_enabled(self) -> bool:
        """Check if audit logging is enabled."""
        return self._enabled

    async def log(
        self,
        action: AuditAction,
        user_id: Optional[UUID] = None,
        repository_id: Optional[UUID] = None,
        resource_type: Optional[ResourceType] = None,
        resource_id: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLogEntry]:
        """
        Log an audit event.

        Args:
            action: The action being performed
            user_id: ID of the user performing the action
            repository_id: Repository context (if applicable)
            resource_type: Type of resource being acted on
            resource_id: ID of the resource being acted on
            metadata: Additional details about the action

        Returns:
            The stored AuditLogEntry, or None while logging is disabled
        """
        if not self._enabled:
            return None

        entry_data = {
            "action": AuditAction(action).value,
            "user_id": str(user_id) if user_id else None,
            "repository_id": str(repository_id) if repository_id else None,
            "resource_type": ResourceType(resource_type).value if resource_type else None,
            "resource_id": str(resource_id) if resource_id else None,
            "metadata": metadata or {},
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        result = await self.client.table("keysmith_audit_log").insert(entry_data).execute()

        return AuditLogEntry(**result.data[0])

    async def list_by_repository(
        self,
        repository_id: UUID,
        action: Optional[AuditAction] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditLogEntry]:
        """
        List audit entries for a repository, newest first.

        Args:
            repository_id: Repository UUID
            action: Only entries with this action
            limit: Maximum entries to return
            offset: Entries to skip
        """
        query = self.client.table("keysmith_audit_log").select("*").eq(
            "repository_id", str(repository_id)
        )

        if action:
            query = query.eq("action", AuditAction(action).value)

        result = await query.limit(limit).offset(offset).order(
            "created_at", desc=True
        ).execute()

        return [AuditLogEntry(**entry) for entry in result.data]
