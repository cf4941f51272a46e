"""Shared pytest fixtures for Kinobot tests."""

import io

import httpx
import pytest
from PIL import Image

from kinobot.config import Config, ImageSearchConfig, TMDBConfig


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def default_config():
    """Create a configuration with every credential set."""
    return Config(
        tmdb=TMDBConfig(api_key="tmdb-test-key"),
        image_search=ImageSearchConfig(api_key="google-test-key", search_engine_id="cx-test"),
    )


@pytest.fixture
def unconfigured_config():
    """Create a configuration without any credentials."""
    return Config()


@pytest.fixture
def make_transport():
    """Factory for recording mock transports."""
    return RecordingTransport


@pytest.fixture
def image_bytes():
    """Factory for encoded test images."""

    def _make(color=(200, 30, 30, 255), size=(20, 20), fmt="PNG"):
        image = Image.new("RGBA", size, color)
        if fmt == "JPEG":
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def jaws_search_hit():
    """TMDB search result for Jaws."""
    return {
        "id": 578,
        "title": "Jaws",
        "release_date": "1975-06-20",
        "overview": (
            "When the seaside community of Amity finds itself under attack by a "
            "dangerous great white shark, the town's chief of police, a young "
            "marine biologist, and a grizzled hunter embark on a desperate quest "
            "to destroy the beast before it strikes again."
        ),
        "poster_path": "/lxM6kqilAdpdhqUl2biYp5frUxE.jpg",
    }


@pytest.fixture
def jaws_details():
    """TMDB details payload for Jaws."""
    return {
        "id": 578,
        "title": "Jaws",
        "budget": 7000000,
        "revenue": 470700000,
        "runtime": 124,
        "imdb_id": "tt0073195",
    }


@pytest.fixture
def tmdb_handler(jaws_search_hit, jaws_details, image_bytes):
    """Route TMDB search, details and poster requests to canned responses."""
    poster = image_bytes(color=(10, 40, 120, 255))

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/3/search/movie":
            return httpx.Response(200, json={"page": 1, "results": [jaws_search_hit]})
        if request.url.path == "/3/movie/578":
            return httpx.Response(200, json=jaws_details)
        if request.url.host == "image.tmdb.org":
            return httpx.Response(200, content=poster)
        return httpx.Response(404)

    return handler
