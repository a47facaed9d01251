"""
FastAPI application factory.

create_app() builds the HTTP service around a Keysmith client.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .. import __version__
from ..client import Keysmith
from ..config import KeysmithConfig, load_config
from ..integrations.fastapi import register_error_handlers
from ..utils.logging import configure_logging, get_logger
from .apikeys import router as apikeys_router

log = get_logger(__name__)


def create_app(
    keysmith: Optional[Keysmith] = None,
    config: Optional[KeysmithConfig] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        keysmith: Ready client to serve (tests, embedding). When omitted
            the client is created from ``config`` on startup and closed
            on shutdown.
        config: Configuration used when ``keysmith`` is omitted
            (defaults to the environment)

    Example:
        ```python
        app = create_app()
        # uvicorn keysmith.api.app:create_app --factory
        ```
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if keysmith is not None:
            yield
            return

        settings = config or load_config()
        configure_logging(settings)
        client = await Keysmith.from_config(settings)
        app.state.keysmith = client
        log.info("keysmith_started", version=__version__)
        try:
            yield
        finally:
            await client.close()
            app.state.keysmith = None

    app = FastAPI(
        title="Keysmith",
        version=__version__,
        lifespan=lifespan,
    )

    if keysmith is not None:
        app.state.keysmith = keysmith

    register_error_handlers(app)
    app.include_router(apikeys_router)

    return app
