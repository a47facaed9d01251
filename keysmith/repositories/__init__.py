"""
Keysmith repositories module.
"""

from .models import CreateRepositoryRequest, Repository
from .repositories import RepositoryManager

__all__ = [
    "RepositoryManager",
    "Repository",
    "CreateRepositoryRequest",
]
