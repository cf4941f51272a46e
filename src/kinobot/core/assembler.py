"""Builds summary cards from source records.

Fields appear in a fixed order: description, then the
source-specific facts (budget, revenue, runtime, IMDb link for movies;
author, published, pages, rating for books). A fact is only added when the
record carries it.
"""

from typing import Optional, Union

from kinobot.models.records import RawMetadataRecord, ScrapedRecord
from kinobot.models.summary import RGB, EmbedField, MediaSummary
from kinobot.utils.formatting import format_currency, truncate_description

POSTER_BASE_URL = "https://image.tmdb.org/t/p/original"
IMDB_TITLE_URL = "https://www.imdb.com/title/{imdb_id}"

TMDB_FOOTER = "Data sourced from TMDb"
GOODREADS_FOOTER = "Data sourced from Goodreads"

Record = Union[RawMetadataRecord, ScrapedRecord]


def thumbnail_url_for(record: Record, poster_base_url: str = POSTER_BASE_URL) -> Optional[str]:
    """Image URL shown on the card for a record, if it has one."""
    if isinstance(record, RawMetadataRecord):
        if not record.poster_path:
            return None
        return f"{poster_base_url.rstrip('/')}{record.poster_path}"
    return record.thumbnail_url


def _description_fields(description: Optional[str]) -> list[EmbedField]:
    if not description:
        return []
    return [EmbedField("Description", description, False)]


def _movie_summary(record: RawMetadataRecord, poster_base_url: str) -> MediaSummary:
    title = f"{record.title} ({record.year})" if record.year else record.title

    description = truncate_description(record.overview) if record.overview else None

    imdb_url = None
    if record.imdb_id:
        imdb_url = IMDB_TITLE_URL.format(imdb_id=record.imdb_id)

    fields = _description_fields(description)
    if record.budget is not None:
        fields.append(EmbedField("Budget", f"${format_currency(record.budget)}", True))
    if record.revenue is not None:
        fields.append(EmbedField("Revenue", f"${format_currency(record.revenue)}", True))
    if record.runtime is not None:
        fields.append(EmbedField("Runtime", f"{record.runtime} minutes", True))
    if imdb_url:
        fields.append(EmbedField("IMDb Link", imdb_url, False))

    return MediaSummary(
        title=title,
        link_url=imdb_url,
        thumbnail_url=thumbnail_url_for(record, poster_base_url),
        description=description,
        fields=fields,
        footer=TMDB_FOOTER,
    )


def _book_summary(record: ScrapedRecord) -> MediaSummary:
    description = truncate_description(record.description) if record.description else None

    fields = _description_fields(description)
    if record.author:
        fields.append(EmbedField("Author", record.author, True))
    if record.published:
        fields.append(EmbedField("Published", record.published, True))
    if record.page_count is not None:
        fields.append(EmbedField("Pages", str(record.page_count), True))
    if record.rating is not None:
        fields.append(EmbedField("Rating", f"{record.rating:g}/5", True))

    return MediaSummary(
        title=record.title,
        link_url=record.url,
        thumbnail_url=record.thumbnail_url,
        description=description,
        fields=fields,
        footer=GOODREADS_FOOTER,
    )


def assemble(
    record: Record,
    accent_color: Optional[RGB] = None,
    poster_base_url: str = POSTER_BASE_URL,
) -> MediaSummary:
    """Map a source record to a new summary card.

    Args:
        record: Movie or book record
        accent_color: Color extracted from the record's image, if any
        poster_base_url: Prefix for TMDB poster paths

    Returns:
        MediaSummary; ``accent_color`` is dropped when there is no thumbnail
    """
    if isinstance(record, RawMetadataRecord):
        summary = _movie_summary(record, poster_base_url)
    elif isinstance(record, ScrapedRecord):
        summary = _book_summary(record)
    else:
        raise TypeError(f"Unsupported record type: {type(record).__name__}")

    if summary.thumbnail_url is not None:
        summary.accent_color = accent_color
    return summary
