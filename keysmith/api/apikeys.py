"""
HTTP endpoints for API key management.

All routes require a bearer access token. Keys are issued for a
repository; the caller's permission on that repository decides which
scopes they may hand out.
"""

from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends

from ..apikeys.models import ApiKeyDTO, CreateApiKeyRequest, EditApiKeyRequest
from ..auth.models import UserAccount
from ..client import Keysmith
from ..errors import NotFoundError
from ..integrations.fastapi import get_keysmith, require_user

router = APIRouter(prefix="/api/apiKeys", tags=["API keys"])


@router.post("", response_model=ApiKeyDTO)
async def create_api_key(
    body: CreateApiKeyRequest,
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> ApiKeyDTO:
    """Issue a key for a repository the caller has access to."""
    repository = await keysmith.repositories.get(body.repository_id)
    if not repository:
        raise NotFoundError("Repository not found")

    await keysmith.permissions.check_api_key_scopes(user.id, repository.id, body.scopes)
    return await keysmith.api_keys.create(user, body.scopes, repository)


@router.post("/edit", response_model=ApiKeyDTO)
async def edit_api_key(
    body: EditApiKeyRequest,
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> ApiKeyDTO:
    """Replace the scopes of a key. Allowed for its owner and repository managers."""
    api_key = await keysmith.api_keys.get(body.id)
    if not api_key:
        raise NotFoundError("API key not found")

    await keysmith.api_keys.check_key_access(user, api_key)
    await keysmith.permissions.check_api_key_scopes(
        user.id, api_key.repository_id, body.scopes
    )
    return await keysmith.api_keys.edit(user, body.id, body.scopes)


@router.get("", response_model=List[ApiKeyDTO])
async def list_my_api_keys(
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> List[ApiKeyDTO]:
    """Keys owned by the caller."""
    return await keysmith.api_keys.list_for_caller(user)


@router.get("/availableScopes", response_model=Dict[str, List[str]])
async def available_scopes(
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> Dict[str, List[str]]:
    """Scopes grantable per repository permission level."""
    return keysmith.api_keys.available_scopes()


@router.get("/repository/{repository_id}", response_model=List[ApiKeyDTO])
async def list_repository_api_keys(
    repository_id: UUID,
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> List[ApiKeyDTO]:
    """All keys of a repository. Requires full access to it."""
    return await keysmith.api_keys.list_for_repository(user, repository_id)


@router.delete("/{key_id}")
async def delete_api_key(
    key_id: UUID,
    user: UserAccount = Depends(require_user),
    keysmith: Keysmith = Depends(get_keysmith),
) -> Dict[str, bool]:
    """Delete a key. Allowed for its owner and repository managers."""
    await keysmith.api_keys.delete(user, key_id)
    return {"success": True}
