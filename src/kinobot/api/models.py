"""Pydantic models for API requests and responses."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class KinoRequest(BaseModel):
    """Options for the /kino command."""

    title: str = Field(..., min_length=1, description="The title of the movie")
    year: Optional[int] = Field(
        default=None, ge=1870, le=2200, description="The year the movie was released"
    )


class BookRequest(BaseModel):
    """Options for the /book command."""

    title: str = Field(..., min_length=1, description="The title of the book")


class ImageRequest(BaseModel):
    """Options for the /image command."""

    term: str = Field(..., min_length=1, description="What to search for")


class CommandResponse(BaseModel):
    """Reply payload: an embed or a plain-text message."""

    embed: Optional[dict[str, Any]] = None
    content: Optional[str] = None
    ephemeral: Optional[bool] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
