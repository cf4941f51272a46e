"""Goodreads book lookup using httpx + BeautifulSoup.

A lookup fetches the search results page, follows the first result row to
the book's detail page, and scrapes it. Each field on the detail page has its
own extractor; a missing or malformed element only drops that one field.
"""

import re
from typing import Any, Callable, Optional
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import httpx
from bs4 import BeautifulSoup

from kinobot.config import GoodreadsConfig
from kinobot.exceptions import ExtractionError, NoResultsError, SourceUnavailable
from kinobot.models.records import ScrapedRecord
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)


class Selectors:
    """CSS selectors for Goodreads pages."""

    result_table = "table.tableList"
    result_row = "tr"
    result_link = "a[href]"

    title = 'h1[data-testid="bookTitle"]'
    author = "span.ContributorLink__name"
    rating = "div.RatingStatistics__rating"
    thumbnail = "img.ResponsiveImage"
    description = 'div[data-testid="description"] span.Formatted'
    details_container = "div.FeaturedDetails"
    details_item = "p"
    canonical = 'link[rel="canonical"]'


# Position of the page count line inside the details container; the
# publication line follows it
PAGES_POSITION = 0

Extractor = Callable[[BeautifulSoup], Any]


def _canonicalize(url: str) -> str:
    """Drop query string and fragment from a detail page URL."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def parse_search_page(html: str, base_url: str) -> str:
    """Find the detail page URL of the first search result.

    Args:
        html: Search results page
        base_url: Site root for resolving relative links

    Returns:
        Absolute detail page URL

    Raises:
        NoResultsError: If the result table, its first row or the row's link is missing
    """
    soup = BeautifulSoup(html, "html.parser")

    table = soup.select_one(Selectors.result_table)
    if table is None:
        raise NoResultsError("No result table on search page")

    row = table.select_one(Selectors.result_row)
    if row is None:
        raise NoResultsError("Result table has no rows")

    link = row.select_one(Selectors.result_link)
    if link is None or not link.get("href"):
        raise NoResultsError("First result row has no link")

    return _canonicalize(urljoin(base_url, link["href"]))


def _select_text(soup: BeautifulSoup, selector: str, separator: str = "") -> str:
    element = soup.select_one(selector)
    if element is None:
        raise ExtractionError(f"No element matches {selector!r}")
    text = element.get_text(separator, strip=True)
    if not text:
        raise ExtractionError(f"Element {selector!r} is empty")
    return text


def _details_item(soup: BeautifulSoup, position: int) -> str:
    container = soup.select_one(Selectors.details_container)
    if container is None:
        raise ExtractionError("No details container")
    items = container.select(Selectors.details_item)
    if len(items) <= position:
        raise ExtractionError(f"Details container has no item at {position}")
    text = items[position].get_text(" ", strip=True)
    if not text:
        raise ExtractionError(f"Details item {position} is empty")
    return text


def extract_title(soup: BeautifulSoup) -> str:
    return _select_text(soup, Selectors.title)


def extract_author(soup: BeautifulSoup) -> str:
    return _select_text(soup, Selectors.author)


def extract_rating(soup: BeautifulSoup) -> float:
    """Average rating on the 0-5 scale."""
    text = _select_text(soup, Selectors.rating)
    try:
        return float(text)
    except ValueError as e:
        raise ExtractionError(f"Rating {text!r} is not a number") from e


def extract_thumbnail(soup: BeautifulSoup) -> str:
    image = soup.select_one(Selectors.thumbnail)
    if image is None or not image.get("src"):
        raise ExtractionError("No cover image")
    return image["src"]


def extract_description(soup: BeautifulSoup) -> str:
    return _select_text(soup, Selectors.description, separator="\n")


def extract_page_count(soup: BeautifulSoup) -> int:
    """Page count from a line like "320 pages, Paperback"."""
    text = _details_item(soup, PAGES_POSITION)
    match = re.search(r"\d[\d,]*", text)
    if match is None:
        raise ExtractionError(f"No page count in {text!r}")
    return int(match.group().replace(",", ""))


def extract_published(soup: BeautifulSoup) -> str:
    return _details_item(soup, PAGES_POSITION + 1)


def extract_canonical_url(soup: BeautifulSoup) -> str:
    link = soup.select_one(Selectors.canonical)
    if link is None or not link.get("href"):
        raise ExtractionError("No canonical link")
    return link["href"]


EXTRACTORS: dict[str, Extractor] = {
    "title": extract_title,
    "author": extract_author,
    "rating": extract_rating,
    "thumbnail_url": extract_thumbnail,
    "description": extract_description,
    "page_count": extract_page_count,
    "published": extract_published,
    "url": extract_canonical_url,
}


def run_extractors(
    soup: BeautifulSoup,
    extractors: dict[str, Extractor],
) -> dict[str, Any]:
    """Run every extractor independently and keep the values that succeeded."""
    values = {}
    for name, extractor in extractors.items():
        try:
            values[name] = extractor(soup)
        except ExtractionError as e:
            logger.debug("Field extraction failed", field=name, reason=str(e))
    return values


def parse_book_page(html: str, page_url: Optional[str] = None) -> ScrapedRecord:
    """Scrape a Goodreads detail page.

    Args:
        html: Detail page HTML
        page_url: URL the page was fetched from, used when the page has no
            canonical link and as the base for a relative cover URL

    Returns:
        ScrapedRecord with whichever fields could be extracted
    """
    soup = BeautifulSoup(html, "html.parser")
    values = run_extractors(soup, EXTRACTORS)
    base_url = page_url or values.get("url")
    if "thumbnail_url" in values and base_url:
        values["thumbnail_url"] = urljoin(base_url, values["thumbnail_url"])
    if "url" not in values and page_url:
        values["url"] = page_url
    return ScrapedRecord(**values)


class BookLookup:
    """Resolves a free-text book title to a scraped Goodreads record."""

    def __init__(self, client: httpx.AsyncClient, config: Optional[GoodreadsConfig] = None):
        """Initialize book lookup.

        Args:
            client: Shared HTTP client
            config: Goodreads settings (defaults when None)
        """
        self.client = client
        self.config = config or GoodreadsConfig()
        self.base_url = self.config.base_url.rstrip("/")

    def search_url(self, title: str) -> str:
        """Search results URL for a title."""
        return f"{self.base_url}/search?{urlencode({'q': title})}"

    async def _fetch(self, url: str) -> str:
        try:
            response = await self.client.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Goodreads request failed", url=url, error=str(e))
            raise SourceUnavailable(f"Goodreads request failed: {e}") from e
        return response.text

    async def lookup_document(self, title: str) -> ScrapedRecord:
        """Look up a book by title.

        Args:
            title: Book title as typed by the user

        Returns:
            ScrapedRecord for the first search result

        Raises:
            NoResultsError: If the search page has no usable result row
            SourceUnavailable: If either page cannot be fetched
        """
        search_html = await self._fetch(self.search_url(title))
        detail_url = parse_search_page(search_html, self.base_url)
        logger.info("Resolved book detail page", title=title, url=detail_url)

        detail_html = await self._fetch(detail_url)
        record = parse_book_page(detail_html, page_url=detail_url)
        logger.info(
            "Scraped book page",
            title=record.title,
            author=record.author,
            rating=record.rating,
        )
        return record
