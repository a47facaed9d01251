"""
Main Keysmith client.

This is the primary interface users interact with.
"""

from typing import Optional

from .apikeys import ApiKeyManager
from .audit import AuditLogger
from .auth import SessionManager, UserManager
from .config import KeysmithConfig, load_config
from .permissions import PermissionManager
from .repositories import RepositoryManager
from .utils.supabase import KeysmithSupabaseClient


class Keysmith:
    """
    Main Keysmith client.

    Gives access to users, sessions, repositories, permissions, API keys
    and the audit log.

    Example:
        ```python
        from keysmith import Keysmith

        # Initialize from environment variables
        keysmith = await Keysmith.create()

        user = await keysmith.users.create("ben@example.com", name="Ben")
        repo = await keysmith.repositories.create("Mobile app", created_by=user.id)
        key = await keysmith.api_keys.create(user, {ApiScope.TRANSLATIONS_VIEW}, repo)
        ```
    """

    def __init__(self, config: KeysmithConfig, client: KeysmithSupabaseClient) -> None:
        """
        Initialize Keysmith client.

        Args:
            config: Keysmith configuration
            client: Supabase client wrapper

        Note:
            Use Keysmith.create() instead of direct instantiation.
        """
        self.config = config
        self.client = client

        self.audit = AuditLogger(self)
        self.users = UserManager(self)
        self.sessions = SessionManager(self)
        self.repositories = RepositoryManager(self)
        self.permissions = PermissionManager(self)
        self.api_keys = ApiKeyManager(self)

    @classmethod
    async def create(
        cls,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        **kwargs,
    ) -> "Keysmith":
        """
        Create and initialize a Keysmith client.

        Args:
            supabase_url: Supabase project URL (optional, loads from env)
            supabase_key: Supabase service role key (optional, loads from env)
            **kwargs: Additional configuration options

        Returns:
            Initialized Keysmith client

        Raises:
            ValidationError: If required configuration is missing or invalid
        """
        config_kwargs = kwargs.copy()
        if supabase_url:
            config_kwargs["supabase_url"] = supabase_url
        if supabase_key:
            config_kwargs["supabase_key"] = supabase_key

        return await cls.from_config(load_config(**config_kwargs))

    @classmethod
    async def from_config(cls, config: KeysmithConfig) -> "Keysmith":
        """Create a Keysmith client from an already loaded configuration."""
        client = await KeysmithSupabaseClient.create(config)
        return cls(config=config, client=client)

    async def close(self) -> None:
        """Close the Keysmith client and cleanup resources."""
        await self.client.close()

    async def __aenter__(self) -> "Keysmith":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
