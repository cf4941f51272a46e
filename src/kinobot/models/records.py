"""Source records produced by the lookup adapters."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RawMetadataRecord:
    """A movie as returned by the TMDB search and details endpoints.

    Extended fields (budget, revenue, runtime, imdb_id) stay None when the
    details call did not succeed. A budget or revenue of 0 means TMDB has no
    figure, but it is kept as 0 and rendered as such.
    """

    id: int
    title: str
    overview: str = ""
    release_date: Optional[str] = None  # YYYY-MM-DD
    poster_path: Optional[str] = None
    budget: Optional[int] = None
    revenue: Optional[int] = None
    runtime: Optional[int] = None  # Minutes
    imdb_id: Optional[str] = None

    @property
    def year(self) -> Optional[int]:
        """Release year, if the release date carries one."""
        if self.release_date and self.release_date[:4].isdigit():
            return int(self.release_date[:4])
        return None


@dataclass(frozen=True)
class ScrapedRecord:
    """A book scraped from a Goodreads detail page. Every field is optional."""

    title: Optional[str] = None
    author: Optional[str] = None
    rating: Optional[float] = None  # 0.0 - 5.0
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    page_count: Optional[int] = None
    published: Optional[str] = None  # Free text, e.g. "First published May 1, 1965"
    url: Optional[str] = None


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a two-stage movie lookup.

    ``missing_reason`` is set when the details stage failed and the record
    only carries search data.
    """

    record: RawMetadataRecord
    missing_reason: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True when the details stage contributed to the record."""
        return self.missing_reason is None
