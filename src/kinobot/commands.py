"""Chat commands: /kino, /book and /image.

Each command runs one adapter, optionally derives an accent color from the
found image, and produces exactly one reply: either a summary card or a
short plain-text message.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from kinobot.config import Config
from kinobot.core.assembler import assemble, thumbnail_url_for
from kinobot.core.color import resolve_accent_color
from kinobot.exceptions import ConfigurationError, NotFoundError, SourceUnavailable
from kinobot.metadata.books import BookLookup
from kinobot.metadata.images import ImageSearch
from kinobot.metadata.movies import MovieLookup
from kinobot.metadata.tmdb import TMDBClient
from kinobot.models.summary import MediaSummary
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)

NO_RESULTS = "No results found"
MOVIE_SEARCH_ERROR = "Error searching for movie"
BOOK_SEARCH_ERROR = "Error searching for book"
IMAGE_SEARCH_ERROR = "Error searching for image"
IMAGE_NOT_CONFIGURED = "Image search is not configured"
NO_IMAGE = "No image found"


@dataclass
class Reply:
    """Either a summary card or a plain-text message, never both."""

    summary: Optional[MediaSummary] = None
    content: Optional[str] = None
    ephemeral: bool = False

    @classmethod
    def error(cls, message: str) -> "Reply":
        """Plain-text error only the requester sees."""
        return cls(content=message, ephemeral=True)

    def to_payload(self) -> dict:
        """Render the payload sent to the chat host."""
        if self.summary is not None:
            return {"embed": self.summary.to_embed()}
        return {"content": self.content, "ephemeral": self.ephemeral}


class CommandHandler:
    """Runs lookup commands against the configured sources."""

    def __init__(self, config: Config, client: httpx.AsyncClient):
        """Initialize command handler.

        Args:
            config: Application configuration with resolved credentials
            client: Shared HTTP client for all outbound requests
        """
        self.config = config
        self.client = client

        tmdb_client = None
        if config.tmdb.api_key:
            tmdb_client = TMDBClient(config.tmdb.api_key, client, config.tmdb.base_url)

        self.movies = MovieLookup(tmdb_client)
        self.books = BookLookup(client, config.goodreads)
        self.images = ImageSearch(client, config.image_search)

    async def kino(self, title: str, year: Optional[int] = None) -> Reply:
        """Look up a movie and build its summary card.

        Args:
            title: Movie title
            year: Optional release year

        Returns:
            Reply with the card, or an error message
        """
        try:
            result = await self.movies.lookup_media(title, year=year)
        except ConfigurationError as e:
            logger.error("Movie lookup not configured", error=str(e))
            return Reply.error(str(e))
        except SourceUnavailable as e:
            logger.error("Movie lookup failed", title=title, year=year, error=str(e))
            return Reply.error(MOVIE_SEARCH_ERROR)

        if result is None:
            return Reply.error(NO_RESULTS)

        record = result.record
        poster_url = thumbnail_url_for(record, self.config.tmdb.image_base_url)
        color = await resolve_accent_color(self.client, poster_url)
        summary = assemble(record, color, poster_base_url=self.config.tmdb.image_base_url)

        logger.info(
            "Movie command complete",
            title=summary.title,
            complete=result.is_complete,
            has_color=summary.accent_color is not None,
        )
        return Reply(summary=summary)

    async def book(self, title: str) -> Reply:
        """Look up a book and build its summary card.

        Args:
            title: Book title

        Returns:
            Reply with the card, or an error message
        """
        try:
            record = await self.books.lookup_document(title)
        except NotFoundError:
            logger.info("No book found", title=title)
            return Reply.error(NO_RESULTS)
        except SourceUnavailable as e:
            logger.error("Book lookup failed", title=title, error=str(e))
            return Reply.error(BOOK_SEARCH_ERROR)

        color = await resolve_accent_color(self.client, record.thumbnail_url)
        summary = assemble(record, color)

        logger.info(
            "Book command complete",
            title=summary.title,
            field_count=len(summary.fields),
            has_color=summary.accent_color is not None,
        )
        return Reply(summary=summary)

    async def image(self, term: str) -> Reply:
        """Search for an image and reply with its link.

        Args:
            term: Search term

        Returns:
            Reply with the image URL, or an error message
        """
        try:
            link = await self.images.search_image(term)
        except ConfigurationError as e:
            logger.error("Image search not configured", error=str(e))
            return Reply.error(IMAGE_NOT_CONFIGURED)
        except SourceUnavailable as e:
            logger.error("Image search failed", term=term, error=str(e))
            return Reply.error(IMAGE_SEARCH_ERROR)

        if not link:
            return Reply.error(NO_IMAGE)

        return Reply(content=link)
