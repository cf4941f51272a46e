"""Kinobot - movie, book and image lookup commands for chat bots."""

__version__ = "0.1.0"
