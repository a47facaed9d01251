"""
Keysmith API key models.

Pydantic models for API keys, their scopes, and the request/response
bodies of the API key endpoints. Wire names are camelCase.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional, Set
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class ApiScope(str, Enum):
    """Actions an API key may perform on its repository."""

    TRANSLATIONS_VIEW = "translations.view"
    TRANSLATIONS_EDIT = "translations.edit"
    KEYS_EDIT = "keys.edit"


def _not_null(value):
    if value is None:
        raise PydanticCustomError("not_null", "must not be null")
    return value


def _not_empty(value):
    if not value:
        raise PydanticCustomError("not_empty", "must not be empty")
    return value


NotNullId = Annotated[Optional[UUID], AfterValidator(_not_null)]
ScopeSet = Annotated[Optional[Set[ApiScope]], AfterValidator(_not_empty)]


class ApiKey(BaseModel):
    """
    API key model - a row of the keysmith_api_keys table.

    Note: key_hash is NOT included; it only serves lookups by secret.
    """

    id: UUID
    key: str

    # Ownership
    user_id: UUID
    repository_id: UUID

    # Permissions
    scopes: Set[ApiScope] = Field(default_factory=set)

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "key": "ks_3q2-7wEVr0sWb8m1vH6i1Xk4PZ0cYtQ9uJ5nLdA2fGo",
                "user_id": "456e7890-e89b-12d3-a456-426614174000",
                "repository_id": "789e0123-e89b-12d3-a456-426614174000",
                "scopes": ["translations.view", "keys.edit"],
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class ApiKeyDTO(BaseModel):
    """API key as returned to HTTP callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    key: str
    scopes: Set[ApiScope]
    repository_id: UUID
    user_id: UUID
    created_at: datetime

    @classmethod
    def from_entity(cls, api_key: ApiKey) -> "ApiKeyDTO":
        return cls(
            id=api_key.id,
            key=api_key.key,
            scopes=set(api_key.scopes),
            repository_id=api_key.repository_id,
            user_id=api_key.user_id,
            created_at=api_key.created_at,
        )


class CreateApiKeyRequest(BaseModel):
    """Request body of POST /api/apiKeys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    repository_id: NotNullId = Field(None, validate_default=True)
    scopes: ScopeSet = Field(None, validate_default=True)


class EditApiKeyRequest(BaseModel):
    """Request body of POST /api/apiKeys/edit. Scopes replace the old set."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: NotNullId = Field(None, validate_default=True)
    scopes: ScopeSet = Field(None, validate_default=True)
