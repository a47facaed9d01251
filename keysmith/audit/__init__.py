"""
Keysmith audit logging module.

Tracks changes to API keys and repository permissions.
"""

from .logger import AuditLogger
from .models import AuditAction, AuditLogEntry, ResourceType

__all__ = [
    "AuditLogger",
    "AuditLogEntry",
    "AuditAction",
    "ResourceType",
]
