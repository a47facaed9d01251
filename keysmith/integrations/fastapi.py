"""
FastAPI integration for Keysmith.

Provides dependency injection for the Keysmith client and the current
user, plus exception handlers that render Keysmith errors as JSON.

Example:
    ```python
    from fastapi import Depends, FastAPI
    from keysmith.integrations.fastapi import register_error_handlers, require_user

    app = FastAPI()
    app.state.keysmith = await Keysmith.create()
    register_error_handlers(app)

    @app.get("/me")
    async def get_me(user = Depends(require_user)):
        return {"username": user.username}
    ```
"""

import re
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..auth.models import UserAccount
from ..client import Keysmith
from ..errors import AuthenticationError, KeysmithError, ValidationError
from ..utils.logging import get_logger

log = get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_keysmith(request: Request) -> Keysmith:
    """
    Get the Keysmith instance attached to the application.

    Example:
        ```python
        @app.get("/repositories")
        async def repositories(keysmith: Keysmith = Depends(get_keysmith)):
            ...
        ```
    """
    keysmith = getattr(request.app.state, "keysmith", None)
    if keysmith is None:
        raise RuntimeError("Keysmith not available. Set app.state.keysmith first.")
    return keysmith


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    keysmith: Keysmith = Depends(get_keysmith),
) -> UserAccount:
    """
    Dependency that requires authentication.

    Returns the current user or raises AuthenticationError (401).
    """
    if not credentials:
        raise AuthenticationError("Not authenticated")

    user = await keysmith.sessions.get_user_from_token(credentials.credentials)

    if not user:
        raise AuthenticationError("Invalid or expired token")

    return user


def _camel(name: str) -> str:
    return re.sub(r"_([a-z0-9])", lambda m: m.group(1).upper(), name)


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers turning Keysmith and request errors into JSON."""

    @app.exception_handler(KeysmithError)
    async def keysmith_error_handler(request: Request, exc: KeysmithError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("request_failed", path=request.url.path, error=exc.message)
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError.from_errors(exc.errors())
        error.field_errors = {
            _camel(field): message for field, message in error.field_errors.items()
        }
        return JSONResponse(status_code=error.status_code, content=error.to_dict())
