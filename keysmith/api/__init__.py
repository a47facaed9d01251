"""
Keysmith HTTP API.
"""

from .apikeys import router
from .app import create_app

__all__ = ["create_app", "router"]
