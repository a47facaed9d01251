"""
Keysmith auth models.

Pydantic models for user accounts.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class UserAccount(BaseModel):
    """
    User account model - represents a user in the keysmith_users table.

    Linked to a Supabase auth user through supabase_auth_id.
    """

    id: UUID
    username: str
    name: Optional[str] = None

    # Auth provider tracking
    supabase_auth_id: Optional[UUID] = None

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "ben@example.com",
                "name": "Ben",
                "supabase_auth_id": "456e7890-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class CreateUserRequest(BaseModel):
    """Request model for creating a new user."""

    username: str = Field(..., min_length=1, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(
        None,
        min_length=6,
        description="Password (if the account signs in with username/password)",
    )
