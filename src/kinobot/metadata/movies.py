"""Two-stage movie lookup against TMDB.

Stage 1 searches by title (and optional year) and keeps the first ranked hit.
Stage 2 fetches budget, revenue, runtime and IMDb id for that hit. Stage 2 is
best-effort: when it fails the search data is still returned, tagged with the
reason the extended fields are missing.
"""

from dataclasses import replace
from typing import Optional

from kinobot.exceptions import ConfigurationError, DetailsUnavailable, SourceUnavailable
from kinobot.metadata.tmdb import TMDBClient, TMDBError
from kinobot.models.records import LookupResult, RawMetadataRecord
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)


def record_from_search_hit(hit: dict) -> RawMetadataRecord:
    """Build a record from one TMDB search result.

    Raises:
        KeyError: If the hit has no id
        TypeError: If the hit is not a mapping
    """
    if not isinstance(hit, dict):
        raise TypeError(f"Search hit is not an object: {type(hit).__name__}")
    return RawMetadataRecord(
        id=hit["id"],
        title=hit.get("title") or hit.get("original_title") or "",
        overview=hit.get("overview") or "",
        release_date=hit.get("release_date") or None,
        poster_path=hit.get("poster_path") or None,
    )


def merge_details(record: RawMetadataRecord, details: dict) -> RawMetadataRecord:
    """Return a copy of ``record`` carrying the extended details fields."""
    return replace(
        record,
        budget=details.get("budget"),
        revenue=details.get("revenue"),
        runtime=details.get("runtime"),
        imdb_id=details.get("imdb_id") or None,
    )


class MovieLookup:
    """Resolves a free-text movie title to a TMDB record."""

    def __init__(self, tmdb_client: Optional[TMDBClient]):
        """Initialize movie lookup.

        Args:
            tmdb_client: TMDB client, or None when no API key is configured
        """
        self.tmdb_client = tmdb_client

    async def lookup_media(
        self,
        title: str,
        year: Optional[int] = None,
    ) -> Optional[LookupResult]:
        """Look up a movie by title.

        Args:
            title: Movie title as typed by the user
            year: Optional release year filter

        Returns:
            LookupResult for the first search hit, or None if nothing matched

        Raises:
            ConfigurationError: If no TMDB API key is configured
            SourceUnavailable: If the search request fails or returns a
                malformed result
        """
        if self.tmdb_client is None:
            raise ConfigurationError("TMDB_API_KEY not set")

        try:
            results = await self.tmdb_client.search_movie(title, year=year)
        except TMDBError as e:
            raise SourceUnavailable(f"Movie search failed: {e}") from e

        if not results:
            logger.info("No movie found", title=title, year=year)
            return None

        try:
            record = record_from_search_hit(results[0])
        except (KeyError, TypeError) as e:
            raise SourceUnavailable(f"Malformed movie search result: {e!r}") from e

        try:
            details = await self._fetch_details(record.id)
        except DetailsUnavailable as e:
            logger.warning(
                "Movie details unavailable, returning search data only",
                tmdb_id=record.id,
                reason=str(e),
            )
            return LookupResult(record=record, missing_reason=str(e))

        return LookupResult(record=merge_details(record, details))

    async def _fetch_details(self, tmdb_id: int) -> dict:
        """Fetch the details payload for a search hit.

        Raises:
            DetailsUnavailable: If the request fails or the movie is gone
        """
        try:
            details = await self.tmdb_client.get_movie(tmdb_id)
        except TMDBError as e:
            raise DetailsUnavailable(str(e)) from e

        if details is None:
            raise DetailsUnavailable(f"No details for TMDB id {tmdb_id}")
        return details
