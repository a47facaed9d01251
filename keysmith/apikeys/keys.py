"""
API key management for Keysmith.

Handles issuing, editing, listing and deleting repository-scoped
API keys.
"""

import hashlib
import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Type
from uuid import UUID

from postgrest.exceptions import APIError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..audit.models import AuditAction, ResourceType
from ..auth.models import UserAccount
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..repositories.models import Repository
from ..utils.logging import get_logger, key_preview
from .models import ApiKey, ApiKeyDTO, ApiScope, CreateApiKeyRequest, EditApiKeyRequest

if TYPE_CHECKING:
    from ..client import Keysmith

log = get_logger(__name__)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class ApiKeyManager:
    """
    Manages API key operations.

    Every key belongs to one user and one repository and carries a
    non-empty set of scopes.

    Example:
        ```python
        key = await keysmith.api_keys.create(
            owner=user,
            scopes={ApiScope.TRANSLATIONS_VIEW, ApiScope.KEYS_EDIT},
            repository=repo,
        )
        print(f"API Key: {key.key}")

        await keysmith.api_keys.edit(user, key.id, {ApiScope.TRANSLATIONS_EDIT})

        mine = await keysmith.api_keys.list_for_caller(user)
        ```
    """

    # Attempts at drawing a secret that is not already taken
    MAX_KEY_ATTEMPTS = 3

    def __init__(self, keysmith: "Keysmith") -> None:
        """
        Initialize ApiKeyManager.

        Args:
            keysmith: Main Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client
        self.key_prefix = keysmith.config.key_prefix

    def _generate_key(self) -> str:
        """Generate a secure API key."""
        return f"{self.key_prefix}{secrets.token_urlsafe(32)}"

    def _hash_key(self, key: str) -> str:
        """Hash an API key for lookup."""
        return hashlib.sha256(key.encode("utf-8")).hexdigest()

    @staticmethod
    def _validate(model: Type[BaseModel], **values: Any) -> Any:
        try:
            return model(**values)
        except PydanticValidationError as e:
            raise ValidationError.from_errors(e.errors(), model=model) from e

    @staticmethod
    def _to_model(row: Dict[str, Any]) -> ApiKey:
        data = dict(row)
        data.pop("key_hash", None)  # Don't expose hash
        return ApiKey(**data)

    async def create(
        self,
        owner: UserAccount,
        scopes: Optional[Iterable[ApiScope]],
        repository: Optional[Repository],
    ) -> ApiKeyDTO:
        """
        Issue a new API key.

        No permission check happens here; callers acting on behalf of a
        user must run ``permissions.check_api_key_scopes`` first.

        Args:
            owner: User the key belongs to
            scopes: Scopes granted to the key (must not be empty)
            repository: Repository the key is issued for (required)

        Returns:
            ApiKeyDTO with the secret

        Raises:
            ValidationError: If scopes are empty or the repository is missing
        """
        request = self._validate(
            CreateApiKeyRequest,
            repository_id=repository.id if repository is not None else None,
            scopes=set(scopes) if scopes is not None else None,
        )

        now = datetime.now(timezone.utc).isoformat()
        row = None
        for attempt in range(1, self.MAX_KEY_ATTEMPTS + 1):
            secret = self._generate_key()
            try:
                result = await self.client.table("keysmith_api_keys").insert({
                    "key": secret,
                    "key_hash": self._hash_key(secret),
                    "user_id": str(owner.id),
                    "repository_id": str(request.repository_id),
                    "scopes": sorted(scope.value for scope in request.scopes),
                    "created_at": now,
                    "updated_at": now,
                }).execute()
            except APIError as e:
                if e.code != UNIQUE_VIOLATION or attempt == self.MAX_KEY_ATTEMPTS:
                    raise
                log.warning("api_key_collision", attempt=attempt)
                continue
            row = result.data[0]
            break

        api_key = self._to_model(row)

        await self.keysmith.audit.log(
            action=AuditAction.API_KEY_CREATED,
            user_id=owner.id,
            repository_id=api_key.repository_id,
            resource_type=ResourceType.API_KEY,
            resource_id=api_key.id,
            metadata={"scopes": sorted(scope.value for scope in api_key.scopes)},
        )
        log.info(
            "api_key_created",
            key_id=str(api_key.id),
            key_prefix=key_preview(api_key.key),
            user_id=str(owner.id),
            repository_id=str(api_key.repository_id),
        )

        return ApiKeyDTO.from_entity(api_key)

    async def edit(
        self,
        caller: UserAccount,
        key_id: Optional[UUID],
        scopes: Optional[Iterable[ApiScope]],
    ) -> ApiKeyDTO:
        """
        Replace the scope set of an API key on behalf of ``caller``.

        The new set replaces the old one entirely. Only the owner or a
        user with full access to the key's repository may edit it.

        Raises:
            ValidationError: If scopes are empty or the id is missing
            NotFoundError: If no key has this id
            ForbiddenError: If the caller may not edit it
        """
        request = self._validate(
            EditApiKeyRequest,
            id=key_id,
            scopes=set(scopes) if scopes is not None else None,
        )

        existing = await self.get(request.id)
        if not existing:
            raise NotFoundError("API key not found")

        await self.check_key_access(caller, existing)

        new_scopes = sorted(scope.value for scope in request.scopes)
        result = await self.client.table("keysmith_api_keys").update({
            "scopes": new_scopes,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }).eq("id", str(request.id)).execute()

        if not result.data:
            raise NotFoundError("API key not found")

        api_key = self._to_model(result.data[0])

        await self.keysmith.audit.log(
            action=AuditAction.API_KEY_UPDATED,
            user_id=caller.id,
            repository_id=api_key.repository_id,
            resource_type=ResourceType.API_KEY,
            resource_id=api_key.id,
            metadata={
                "old_scopes": sorted(scope.value for scope in existing.scopes),
                "scopes": new_scopes,
            },
        )
        log.info(
            "api_key_updated",
            key_id=str(api_key.id),
            user_id=str(caller.id),
            scopes=new_scopes,
        )

        return ApiKeyDTO.from_entity(api_key)

    async def get(self, key_id: UUID) -> Optional[ApiKey]:
        """
        Get an API key by ID.

        Returns:
            ApiKey instance or None if not found
        """
        result = await self.client.table("keysmith_api_keys").select("*").eq(
            "id", str(key_id)
        ).execute()

        if not result.data:
            return None

        return self._to_model(result.data[0])

    async def get_by_key(self, key: str) -> Optional[ApiKey]:
        """Look up an API key by its secret value."""
        result = await self.client.table("keysmith_api_keys").select("*").eq(
            "key_hash", self._hash_key(key)
        ).execute()

        if not result.data:
            return None

        return self._to_model(result.data[0])

    async def list_for_caller(self, caller: UserAccount) -> List[ApiKeyDTO]:
        """
        List the keys owned by ``caller``, oldest first.

        Never includes another user's keys, even on shared repositories.
        """
        result = await self.client.table("keysmith_api_keys").select("*").eq(
            "user_id", str(caller.id)
        ).order("created_at").execute()

        return [ApiKeyDTO.from_entity(self._to_model(row)) for row in result.data]

    async def list_by_repository(self, repository_id: UUID) -> List[ApiKey]:
        """List every key issued for a repository, regardless of owner."""
        result = await self.client.table("keysmith_api_keys").select("*").eq(
            "repository_id", str(repository_id)
        ).order("created_at").execute()

        return [self._to_model(row) for row in result.data]

    async def list_for_repository(
        self,
        caller: UserAccount,
        repository_id: UUID,
    ) -> List[ApiKeyDTO]:
        """
        List all keys of a repository on behalf of ``caller``.

        Raises:
            NotFoundError: If the repository does not exist
            ForbiddenError: If the caller lacks full access to it
        """
        repository = await self.keysmith.repositories.get(repository_id)
        if not repository:
            raise NotFoundError("Repository not found")

        if not await self.keysmith.permissions.has_full_access(caller.id, repository_id):
            log.info(
                "api_key_listing_denied",
                user_id=str(caller.id),
                repository_id=str(repository_id),
            )
            raise ForbiddenError("Operation not permitted")

        keys = await self.list_by_repository(repository_id)
        return [ApiKeyDTO.from_entity(key) for key in keys]

    async def delete(self, caller: UserAccount, key_id: UUID) -> None:
        """
        Permanently delete an API key.

        The owner may always delete; anyone else needs full access to
        the key's repository.

        Raises:
            NotFoundError: If no key has this id
            ForbiddenError: If the caller may not delete it
        """
        api_key = await self.get(key_id)
        if not api_key:
            raise NotFoundError("API key not found")

        await self.check_key_access(caller, api_key)

        await self.client.table("keysmith_api_keys").delete().eq(
            "id", str(key_id)
        ).execute()

        await self.keysmith.audit.log(
            action=AuditAction.API_KEY_DELETED,
            user_id=caller.id,
            repository_id=api_key.repository_id,
            resource_type=ResourceType.API_KEY,
            resource_id=api_key.id,
        )
        log.info("api_key_deleted", key_id=str(key_id), user_id=str(caller.id))

    async def check_key_access(self, caller: UserAccount, api_key: ApiKey) -> None:
        """
        Ensure ``caller`` may change or delete ``api_key``.

        Raises:
            ForbiddenError: If the caller neither owns the key nor has
                full access to its repository
        """
        if api_key.user_id == caller.id:
            return

        if not await self.keysmith.permissions.has_full_access(caller.id, api_key.repository_id):
            log.info(
                "api_key_access_denied",
                key_id=str(api_key.id),
                user_id=str(caller.id),
            )
            raise ForbiddenError("Operation not permitted")

    @staticmethod
    def available_scopes() -> Dict[str, List[str]]:
        """Scopes each repository permission level may grant."""
        from ..permissions.models import SCOPES_BY_PERMISSION

        return {
            permission.value: sorted(scope.value for scope in scopes)
            for permission, scopes in SCOPES_BY_PERMISSION.items()
        }
