"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- The in-memory stores, created once per application
- Web routes
- Middleware (sessions, logging)
- Rate limiting and exception handlers

Run with `tinyapp` (console script), `python -m tinyapp.main`, or
`uvicorn --factory tinyapp.main:create_app`. The rate limiter is process-wide
and is switched on or off by RATE_LIMIT_ENABLED when the process starts.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from tinyapp import __version__
from tinyapp.api import routes
from tinyapp.core.exceptions import LoginRequiredError
from tinyapp.core.logging_config import configure_logging
from tinyapp.core.rate_limit import limiter
from tinyapp.core.setting import EnvSettingsOptions, Settings, settings
from tinyapp.middleware.logging import add_logging_middleware
from tinyapp.services.link_store import LinkStore
from tinyapp.services.seed import seed_demo_data
from tinyapp.services.user_directory import UserDirectory

logger = logging.getLogger("tinyapp")


async def login_required_handler(request: Request, exc: LoginRequiredError):
    return routes.redirect("/login")


def create_app(
    app_settings: Optional[Settings] = None,
    link_store: Optional[LinkStore] = None,
    user_directory: Optional[UserDirectory] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Args:
        app_settings: Settings to use (defaults to the environment settings)
        link_store: Link store to serve (a new empty one by default)
        user_directory: User directory to serve (a new empty one by default)
    
    Returns:
        Configured FastAPI app
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title="TinyApp",
        description="A small URL shortener with per-user links and visit tracking",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = app_settings
    if link_store is None:
        link_store = LinkStore(
            code_length=app_settings.SHORT_CODE_LENGTH,
            max_collision_retries=app_settings.MAX_COLLISION_RETRIES,
        )
    if user_directory is None:
        user_directory = UserDirectory(bcrypt_rounds=app_settings.BCRYPT_ROUNDS)
    app.state.link_store = link_store
    app.state.user_directory = user_directory

    if app_settings.SEED_DEMO_DATA:
        seed_demo_data(
            app.state.link_store,
            app.state.user_directory,
            app_settings.DEMO_EMAIL,
            app_settings.DEMO_PASSWORD,
        )
        logger.info(f"Seeded demo user {app_settings.DEMO_EMAIL}")

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(LoginRequiredError, login_required_handler)

    # Added first so the session middleware wraps it and the session is populated
    add_logging_middleware(app)
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.SECRET_KEY,
        max_age=app_settings.SESSION_MAX_AGE,
        https_only=app_settings.ENV_SETTING == EnvSettingsOptions.production,
    )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring.
        
        Returns:
            Health status of the service
        """
        return {"status": "healthy"}

    app.include_router(routes.router)

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    logger.info(f"HTTP Server Running - Listening on Port {settings.PORT}")
    uvicorn.run(create_app(), host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
