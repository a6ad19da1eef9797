from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healthdesk.app import App
from healthdesk.config import Config
from healthdesk.errors import DependencyError, UserError
from healthdesk.web.error_handlers import dependency_error_handler, general_exception_handler, user_error_handler
from healthdesk.web.openapi import set_custom_openapi
from healthdesk.web.routers import auth_router, profile_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="HealthDesk API", lifespan=lifespan)
    app.state.app = app_instance
    app.state.config = config

    # Frontend lives on another origin and sends the session cookie along
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(profile_router)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(DependencyError, dependency_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config.session_cookie_name)

    return app
