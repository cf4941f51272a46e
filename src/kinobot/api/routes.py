"""API routes for chat commands."""

import hashlib
import hmac
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from kinobot import __version__
from kinobot.api.models import (
    BookRequest,
    CommandResponse,
    HealthResponse,
    ImageRequest,
    KinoRequest,
)
from kinobot.commands import CommandHandler, Reply
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Verify request HMAC signature.

    Args:
        body: Request body bytes
        signature: Signature from header
        secret: Shared secret

    Returns:
        True if signature is valid
    """
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


async def require_signature(request: Request):
    """Reject unsigned or badly signed requests when a shared secret is set."""
    secret = request.app.state.kinobot.config.api.shared_secret
    if not secret:
        return

    signature = request.headers.get("X-Signature")
    if not signature:
        logger.warning("Missing request signature", path=request.url.path)
        raise HTTPException(status_code=401, detail="Missing signature")

    body = await request.body()
    if not verify_signature(body, signature, secret):
        logger.warning("Invalid request signature", path=request.url.path)
        raise HTTPException(status_code=401, detail="Invalid signature")


def get_handler(request: Request) -> CommandHandler:
    """Command handler created during app startup."""
    return request.app.state.kinobot.handler


def _respond(reply: Reply) -> CommandResponse:
    return CommandResponse(**reply.to_payload())


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check endpoint."""
    app_state = request.app.state.kinobot
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - app_state.start_time, 2),
    )


@router.post(
    "/commands/kino",
    response_model=CommandResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_signature)],
)
async def kino(payload: KinoRequest, handler: CommandHandler = Depends(get_handler)):
    """Look up a movie on TMDB."""
    return _respond(await handler.kino(payload.title, year=payload.year))


@router.post(
    "/commands/book",
    response_model=CommandResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_signature)],
)
async def book(payload: BookRequest, handler: CommandHandler = Depends(get_handler)):
    """Look up a book on Goodreads."""
    return _respond(await handler.book(payload.title))


@router.post(
    "/commands/image",
    response_model=CommandResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_signature)],
)
async def image(payload: ImageRequest, handler: CommandHandler = Depends(get_handler)):
    """Search for an image."""
    return _respond(await handler.image(payload.term))
