"""Image search through the Google Custom Search JSON API."""

from typing import Optional

import httpx

from kinobot.config import ImageSearchConfig
from kinobot.exceptions import ConfigurationError, SourceUnavailable
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)


class ImageSearch:
    """Returns the first image link for a search term."""

    def __init__(self, client: httpx.AsyncClient, config: ImageSearchConfig):
        """Initialize image search.

        Args:
            client: Shared HTTP client
            config: API key, search engine id and endpoint
        """
        self.client = client
        self.config = config

    async def search_image(self, term: str) -> Optional[str]:
        """Search for an image.

        Args:
            term: Search term

        Returns:
            Link of the first result item, or None if there are no items

        Raises:
            ConfigurationError: If the API key or search engine id is unset
            SourceUnavailable: If the request fails
        """
        if not self.config.api_key:
            raise ConfigurationError("Image search API key not set")
        if not self.config.search_engine_id:
            raise ConfigurationError("Image search engine id not set")

        params = {
            "key": self.config.api_key,
            "cx": self.config.search_engine_id,
            "q": term,
            "searchType": "image",
            "num": 1,
        }

        try:
            response = await self.client.get(self.config.endpoint, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Image search error",
                status_code=e.response.status_code,
                term=term,
                error=str(e),
            )
            raise SourceUnavailable(f"Image search error: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Image search failed", term=term, error=str(e))
            raise SourceUnavailable(f"Image search failed: {e}") from e

        items = data.get("items") or []
        if not items:
            logger.info("No image found", term=term)
            return None

        link = items[0].get("link")
        logger.info("Found image", term=term, link=link)
        return link
