"""Lookup adapters for Kinobot.

This package contains the adapters that query external sources (TMDB,
Goodreads, Google image search) and translate their responses into records.
"""

from kinobot.metadata.books import BookLookup
from kinobot.metadata.images import ImageSearch
from kinobot.metadata.movies import MovieLookup
from kinobot.metadata.tmdb import TMDBClient

__all__ = ["BookLookup", "ImageSearch", "MovieLookup", "TMDBClient"]
