"""Data models for lookup records and summary cards."""

from kinobot.models.records import LookupResult, RawMetadataRecord, ScrapedRecord
from kinobot.models.summary import RGB, EmbedField, MediaSummary

__all__ = [
    "EmbedField",
    "LookupResult",
    "MediaSummary",
    "RGB",
    "RawMetadataRecord",
    "ScrapedRecord",
]
