"""
Keysmith API keys module.

Repository-scoped API keys for programmatic access.
"""

from .keys import ApiKeyManager
from .models import (
    ApiKey,
    ApiKeyDTO,
    ApiScope,
    CreateApiKeyRequest,
    EditApiKeyRequest,
)

__all__ = [
    "ApiKeyManager",
    "ApiKey",
    "ApiKeyDTO",
    "ApiScope",
    "CreateApiKeyRequest",
    "EditApiKeyRequest",
]
