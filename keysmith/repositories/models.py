"""
Keysmith repository models.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Repository(BaseModel):
    """
    Translation repository - a row of the keysmith_repositories table.

    API keys are always issued for exactly one repository.
    """

    id: UUID
    name: str
    created_by: UUID

    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Mobile app",
                "created_by": "456e7890-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class CreateRepositoryRequest(BaseModel):
    """Request model for creating a repository."""

    name: str = Field(..., min_length=1, max_length=255)
    created_by: UUID
