"""FastAPI application exposing the chat commands over HTTP."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kinobot import __version__
from kinobot.api import routes
from kinobot.api.middleware import RequestLoggingMiddleware
from kinobot.commands import CommandHandler
from kinobot.config import Config
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)


class AppState:
    """Application state container."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport
        self.start_time = time.time()
        self.client: Optional[httpx.AsyncClient] = None  # Created in lifespan
        self.handler: Optional[CommandHandler] = None  # Created in lifespan


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app_state = app.state.kinobot
    config = app_state.config

    logger.info("Starting Kinobot", version=__version__)

    app_state.client = httpx.AsyncClient(
        timeout=config.tmdb.timeout_seconds,
        transport=app_state.transport,
    )
    app_state.handler = CommandHandler(config, app_state.client)

    yield

    logger.info("Shutting down Kinobot")
    await app_state.client.aclose()
    logger.info("Shutdown complete")


def create_app(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Application configuration
        transport: Optional httpx transport for outbound requests

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Kinobot",
        description="Movie, book and image lookup commands",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.state.kinobot = AppState(config, transport)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors with detailed logging."""
        logger.error(
            "Command payload validation failed",
            path=request.url.path,
            errors=exc.errors(),
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "status": "error",
                "message": "Invalid command options",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions."""
        logger.error(
            "Unhandled exception in command handler",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": "Internal server error",
            },
        )

    app.include_router(routes.router)

    logger.info(
        "FastAPI application created",
        version=__version__,
        api_port=config.api.port,
        signature_auth=config.api.shared_secret is not None,
    )

    return app
