from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles

from minibank.app import App
from minibank.config import Config
from minibank.errors import StoreError, UserError
from minibank.web.error_handlers import (
    general_exception_handler,
    request_validation_handler,
    store_error_handler,
    user_error_handler,
)
from minibank.web.middleware import ProtectedDocumentMiddleware
from minibank.web.openapi import set_custom_openapi
from minibank.web.routers import account_router, auth_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="MiniBank API",
        lifespan=lifespan,
    )
    # Available before startup so the auth gate never sees a half-built state
    app.state.app = app_instance
    app.state.config = config

    app.add_middleware(
        ProtectedDocumentMiddleware,
        protected_paths=config.protected_paths,
        login_path=config.login_path,
        cookie_name=config.session_cookie_name,
    )

    app.include_router(auth_router, prefix="/api")
    app.include_router(account_router, prefix="/api")

    # Frontend documents, mounted last so API routes take precedence
    if config.static_path:
        app.mount("/", StaticFiles(directory=config.static_path, html=True), name="static")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config.session_cookie_name)

    return app
