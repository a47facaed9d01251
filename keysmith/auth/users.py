"""
User management for Keysmith.

Creates accounts in Supabase auth and mirrors them into keysmith_users.

Wraps: supabase_auth._async.gotrue_admin_api.AsyncGoTrueAdminAPI
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from postgrest.exceptions import APIError
from supabase_auth.types import AdminUserAttributes

from ..utils.logging import get_logger
from .models import CreateUserRequest, UserAccount

log = get_logger(__name__)


class UserManager:
    """
    Manages user accounts in keysmith_users with Supabase auth sync.

    The flow for user creation:
    1. Create the Supabase auth user (for authentication)
    2. Insert into keysmith_users with the supabase_auth_id link
       (the auth user is deleted again if this insert fails)
    """

    def __init__(self, keysmith) -> None:
        """
        Initialize UserManager.

        Args:
            keysmith: Main Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client

    async def create(
        self,
        username: str,
        name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserAccount:
        """
        Create a new user account.

        Args:
            username: Login name (the account's email address)
            name: Display name
            password: Password (optional, can be set later)

        Returns:
            UserAccount instance

        Example:
            ```python
            ben = await keysmith.users.create("ben@example.com", name="Ben")
            ```
        """
        request = CreateUserRequest(username=username, name=name, password=password)

        auth_attributes: AdminUserAttributes = {
            "email": request.username,
            "email_confirm": True,
        }
        if request.password:
            auth_attributes["password"] = request.password
        if request.name:
            auth_attributes["user_metadata"] = {"name": request.name}

        auth_response = await self.client.auth.admin.create_user(auth_attributes)
        auth_user = auth_response.user

        now = datetime.now(timezone.utc).isoformat()
        try:
            result = await self.client.table("keysmith_users").insert({
                "username": request.username,
                "name": request.name,
                "supabase_auth_id": str(auth_user.id),
                "created_at": now,
                "updated_at": now,
            }).execute()
        except APIError as e:
            # Roll back the auth user created above
            await self.client.auth.admin.delete_user(str(auth_user.id))
            log.warning(
                "user_create_rolled_back",
                username=request.username,
                supabase_auth_id=str(auth_user.id),
                error_code=e.code,
            )
            raise

        user = UserAccount(**result.data[0])
        log.info("user_created", user_id=str(user.id), username=user.username)
        return user

    async def get(self, user_id: UUID) -> Optional[UserAccount]:
        """Get a user by ID."""
        result = await self.client.table("keysmith_users").select("*").eq(
            "id", str(user_id)
        ).execute()

        if not result.data:
            return None

        return UserAccount(**result.data[0])

    async def get_by_username(self, username: str) -> Optional[UserAccount]:
        """
        Get a user by username.

        Example:
            ```python
            user = await keysmith.users.get_by_username("ben@example.com")
            ```
        """
        result = await self.client.table("keysmith_users").select("*").eq(
            "username", username
        ).execute()

        if not result.data:
            return None

        return UserAccount(**result.data[0])

    async def get_by_auth_id(self, supabase_auth_id: str) -> Optional[UserAccount]:
        """Get the account linked to a Supabase auth user."""
        result = await self.client.table("keysmith_users").select("*").eq(
            "supabase_auth_id", str(supabase_auth_id)
        ).execute()

        if not result.data:
            return None

        return UserAccount(**result.data[0])
