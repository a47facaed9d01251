"""
Supabase client wrapper for Keysmith.

Thin wrapper around the Supabase AsyncClient configured with the service
role key, so Keysmith can read and write its keysmith_* tables and call the
auth admin API.
"""

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncMemoryStorage

from ..config import KeysmithConfig


class KeysmithSupabaseClient:
    """
    Wrapper around Supabase AsyncClient with Keysmith-specific configuration.

    Example:
        ```python
        config = KeysmithConfig()
        client = await KeysmithSupabaseClient.create(config)

        result = await client.table("keysmith_api_keys").select("*").execute()
        ```
    """

    def __init__(self, config: KeysmithConfig, client: AsyncClient) -> None:
        """
        Initialize the wrapper.

        Note:
            Use KeysmithSupabaseClient.create() instead of direct instantiation.
        """
        self.config = config
        self._client = client

    @classmethod
    async def create(cls, config: KeysmithConfig) -> "KeysmithSupabaseClient":
        """
        Create and initialize a KeysmithSupabaseClient.

        Args:
            config: Keysmith configuration with Supabase credentials

        Returns:
            Initialized KeysmithSupabaseClient
        """
        options = AsyncClientOptions(
            schema=config.db_schema,
            storage=AsyncMemoryStorage(),
            headers={
                "apikey": config.supabase_key,
                "Authorization": f"Bearer {config.supabase_key}",
            },
        )

        client = await acreate_client(
            supabase_url=config.supabase_url,
            supabase_key=config.supabase_key,
            options=options,
        )

        return cls(config=config, client=client)

    @property
    def auth(self):
        """Supabase Auth client (``auth.admin`` for admin operations)."""
        return self._client.auth

    def table(self, table_name: str):
        """
        Create a query builder for a specific table.

        Example:
            ```python
            result = await client.table("keysmith_api_keys").update({
                "scopes": ["translations.view"]
            }).eq("id", key_id).execute()
            ```
        """
        return self._client.table(table_name)

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        # supabase-py holds no pooled resources that need explicit release
        pass
