from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from deltaiota.app import App
from deltaiota.config import Config
from deltaiota.errors import UserError
from deltaiota.web.error_handlers import (
    general_exception_handler,
    http_exception_handler,
    user_error_handler,
    validation_error_handler,
)
from deltaiota.web.middleware import HeadResponseMiddleware
from deltaiota.web.openapi import set_custom_openapi
from deltaiota.web.routers import notifications_router, sessions_router, status_router, users_router

API_PREFIX = "/api/v0"


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Delta Iota API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Add CORS middleware for frontend development
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Wraps the exception handlers, so error envelopes lose their body on HEAD too
    app.add_middleware(HeadResponseMiddleware)

    # Health check endpoint (at root level, not versioned)
    @app.api_route("/health", methods=["GET", "HEAD"])
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(notifications_router, prefix=API_PREFIX)
    app.include_router(status_router, prefix=API_PREFIX)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
