"""
Session handling for Keysmith.

Resolves Supabase access tokens to Keysmith user accounts.

Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient
"""

from typing import Optional

from supabase_auth.errors import AuthError

from ..utils.logging import get_logger
from .models import UserAccount

log = get_logger(__name__)


class SessionManager:
    """Validates access tokens issued by Supabase auth."""

    def __init__(self, keysmith) -> None:
        """
        Initialize SessionManager.

        Args:
            keysmith: Main Keysmith client instance
        """
        self.keysmith = keysmith
        self.client = keysmith.client

    async def get_user_from_token(self, token: str) -> Optional[UserAccount]:
        """
        Get user from an access token.

        Args:
            token: JWT access token

        Returns:
            UserAccount if the token is valid and linked to an account,
            None otherwise

        Example:
            ```python
            user = await keysmith.sessions.get_user_from_token(access_token)
            if user:
                print(f"Token belongs to: {user.username}")
            ```
        """
        try:
            auth_user_response = await self.client.auth.get_user(token)
        except AuthError as e:
            log.info("token_rejected", reason=str(e))
            return None

        if auth_user_response is None or auth_user_response.user is None:
            return None

        return await self.keysmith.users.get_by_auth_id(auth_user_response.user.id)
