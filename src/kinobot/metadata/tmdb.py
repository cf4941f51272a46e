"""TMDB API client."""

from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


class TMDBError(Exception):
    """Base exception for TMDB API errors."""

    pass


class TMDBClient:
    """Thin async client for the TMDB movie endpoints."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ):
        """Initialize TMDB client.

        Args:
            api_key: TMDB API key
            client: Shared HTTP client
            base_url: API root
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = client
        logger.debug("Initialized TMDB client", base_url=self.base_url)

    async def search_movie(
        self,
        query: str,
        year: Optional[int] = None,
    ) -> list[dict]:
        """Search for movies on TMDB.

        Args:
            query: Search query (movie title)
            year: Optional year to filter results

        Returns:
            List of movie search results in TMDB ranking order (may be empty)

        Raises:
            TMDBError: On transport failure, a non-2xx response or a malformed body
        """
        params = {
            "api_key": self.api_key,
            "query": query,
        }
        if year:
            params["year"] = year

        try:
            response = await self.client.get(
                f"{self.base_url}/search/movie",
                params=params,
            )
            response.raise_for_status()

            data = response.json()
            if not isinstance(data, dict):
                raise TMDBError(f"Unexpected TMDB search payload: {type(data).__name__}")
            results = data.get("results") or []
            if not isinstance(results, list):
                raise TMDBError("TMDB search results are not a list")
            logger.info(
                "Searched TMDB for movie",
                query=query,
                year=year,
                result_count=len(results),
            )
            return results

        except httpx.HTTPStatusError as e:
            logger.error(
                "TMDB search error",
                status_code=e.response.status_code,
                query=query,
                error=str(e),
            )
            raise TMDBError(f"TMDB search error: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("TMDB search failed", query=query, error=str(e))
            raise TMDBError(f"TMDB search failed: {e}") from e

    async def get_movie(self, tmdb_id: int) -> Optional[dict]:
        """Get movie details from TMDB.

        Args:
            tmdb_id: TMDB movie ID

        Returns:
            Movie details including budget, revenue, runtime and imdb_id,
            or None if not found

        Raises:
            TMDBError: On transport failure, a non-404 error response or a
                malformed body
        """
        try:
            response = await self.client.get(
                f"{self.base_url}/movie/{tmdb_id}",
                params={"api_key": self.api_key},
            )
            response.raise_for_status()

            data = response.json()
            if not isinstance(data, dict):
                raise TMDBError(f"Unexpected TMDB details payload: {type(data).__name__}")
            logger.info(
                "Fetched movie from TMDB",
                tmdb_id=tmdb_id,
                title=data.get("title"),
                runtime=data.get("runtime"),
            )
            return data

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.warning("Movie not found on TMDB", tmdb_id=tmdb_id)
                return None
            logger.error(
                "TMDB API error",
                status_code=e.response.status_code,
                error=str(e),
            )
            raise TMDBError(f"TMDB API error: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("TMDB details request failed", tmdb_id=tmdb_id, error=str(e))
            raise TMDBError(f"TMDB details request failed: {e}") from e
