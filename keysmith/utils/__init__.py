"""
Keysmith utilities.
"""

from .logging import configure_logging, get_logger
from .supabase import KeysmithSupabaseClient

__all__ = [
    "KeysmithSupabaseClient",
    "configure_logging",
    "get_logger",
]
