"""
CLI command groups.
"""

import asyncio
from typing import List, Set

import typer

from ...apikeys.models import ApiScope


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


def parse_scopes(value: str) -> Set[ApiScope]:
    """Parse a comma-separated scope list, rejecting unknown names."""
    scopes: List[ApiScope] = []
    for name in filter(None, (part.strip() for part in value.split(","))):
        try:
            scopes.append(ApiScope(name))
        except ValueError:
            valid = ", ".join(scope.value for scope in ApiScope)
            raise typer.BadParameter(f"Unknown scope '{name}' (valid: {valid})")
    return set(scopes)
