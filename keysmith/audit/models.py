"""
Keysmith audit log models.

Pydantic models for audit logging in Keysmith.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    """Audit actions recorded by Keysmith."""

    # Repository actions
    REPOSITORY_CREATED = "repository.created"

    # Permission actions
    PERMISSION_GRANTED = "permission.granted"
    PERMISSION_REVOKED = "permission.revoked"

    # API key actions
    API_KEY_CREATED = "api_key.created"
    API_KEY_UPDATED = "api_key.updated"
    API_KEY_DELETED = "api_key.deleted"


class ResourceType(str, Enum):
    """Resource types that can be audited."""

    REPOSITORY = "repository"
    PERMISSION = "permission"
    API_KEY = "api_key"


class AuditLogEntry(BaseModel):
    """
    Audit log entry model - one row of the keysmith_audit_log table.
    """

    id: UUID
    repository_id: Optional[UUID] = None
    user_id: Optional[UUID] = None

    # What happened
    action: AuditAction
    resource_type: Optional[ResourceType] = None
    resource_id: Optional[UUID] = None

    # Details
    metadata: Dict[str, Any] = Field(default_factory=dict)

    # Timestamp
    created_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "repository_id": "456e7890-e89b-12d3-a456-426614174000",
                "user_id": "789e0123-e89b-12d3-a456-426614174000",
                "action": "api_key.created",
                "resource_type": "api_key",
                "resource_id": "012e3456-e89b-12d3-a456-426614174000",
                "metadata": {"scopes": ["translations.view"]},
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }
