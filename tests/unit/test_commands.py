"""Unit tests for the chat command layer."""

import httpx
import pytest

from kinobot.commands import (
    BOOK_SEARCH_ERROR,
    IMAGE_NOT_CONFIGURED,
    MOVIE_SEARCH_ERROR,
    NO_IMAGE,
    NO_RESULTS,
    CommandHandler,
    Reply,
)
from kinobot.models.summary import EmbedField


class TestKinoCommand:
    """Test the movie command."""

    @pytest.mark.asyncio
    async def test_success_with_color(self, default_config, make_transport, tmdb_handler):
        """Should reply with a card carrying the poster color."""
        transport = make_transport(tmdb_handler)
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).kino("Jaws", year=1975)

        summary = reply.summary
        assert reply.content is None
        assert summary.title == "Jaws (1975)"
        assert summary.accent_color is not None
        assert EmbedField("Runtime", "124 minutes", True) in summary.fields
        assert [r.url.host for r in transport.requests] == [
            "api.themoviedb.org",
            "api.themoviedb.org",
            "image.tmdb.org",
        ]

    @pytest.mark.asyncio
    async def test_poster_failure_keeps_card(self, default_config, make_transport, tmdb_handler):
        """A broken poster should only drop the accent color."""

        def handler(request):
            if request.url.host == "image.tmdb.org":
                return httpx.Response(200, content=b"not an image")
            return tmdb_handler(request)

        async with httpx.AsyncClient(transport=make_transport(tmdb_handler)) as client:
            good = await CommandHandler(default_config, client).kino("Jaws", year=1975)
        async with httpx.AsyncClient(transport=make_transport(handler)) as client:
            broken = await CommandHandler(default_config, client).kino("Jaws", year=1975)

        assert broken.summary.accent_color is None
        good.summary.accent_color = None
        assert broken.summary == good.summary

    @pytest.mark.asyncio
    async def test_missing_key(self, unconfigured_config, make_transport, tmdb_handler):
        """Without a TMDB key the reply should say so and nothing is requested."""
        transport = make_transport(tmdb_handler)
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(unconfigured_config, client).kino("Jaws")

        assert reply.summary is None
        assert reply.content == "TMDB_API_KEY not set"
        assert reply.ephemeral
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_search_error(self, default_config, make_transport):
        """A failing search should give the search error message."""
        transport = make_transport(lambda request: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).kino("Jaws")

        assert reply.content == MOVIE_SEARCH_ERROR

    @pytest.mark.asyncio
    async def test_malformed_search_payload(self, default_config, make_transport):
        """A search hit without an id should give the search error message."""
        transport = make_transport(
            lambda request: httpx.Response(200, json={"results": [{"title": "Jaws"}]})
        )
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).kino("Jaws")

        assert reply.summary is None
        assert reply.content == MOVIE_SEARCH_ERROR
        assert reply.ephemeral

    @pytest.mark.asyncio
    async def test_no_results(self, default_config, make_transport):
        """An empty search should give the no results message."""
        transport = make_transport(lambda request: httpx.Response(200, json={"results": []}))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).kino("zzzz")

        assert reply.content == NO_RESULTS


class TestBookCommand:
    """Test the book command."""

    @pytest.mark.asyncio
    async def test_no_results(self, default_config, make_transport):
        """A search page without results should reply with no results."""
        transport = make_transport(lambda request: httpx.Response(200, text="<html></html>"))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).book("zzzz")

        assert reply.content == NO_RESULTS
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_source_error(self, default_config, make_transport):
        """An unreachable site should reply with the book search error."""
        transport = make_transport(lambda request: httpx.Response(502))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).book("Dune")

        assert reply.content == BOOK_SEARCH_ERROR

    @pytest.mark.asyncio
    async def test_success(self, default_config, make_transport, image_bytes):
        """Should scrape the book and color its cover."""
        search = '<table class="tableList"><tr><td><a href="/book/show/1.Dune">Dune</a></td></tr></table>'
        detail = (
            '<h1 data-testid="bookTitle">Dune</h1>'
            '<img class="ResponsiveImage" src="https://images.gr-assets.com/dune.jpg">'
            '<div class="RatingStatistics__rating">4.27</div>'
        )
        cover = image_bytes(color=(180, 120, 40, 255))

        def handler(request):
            if request.url.path == "/search":
                return httpx.Response(200, text=search)
            if request.url.path == "/book/show/1.Dune":
                return httpx.Response(200, text=detail)
            return httpx.Response(200, content=cover)

        async with httpx.AsyncClient(transport=make_transport(handler)) as client:
            reply = await CommandHandler(default_config, client).book("Dune")

        summary = reply.summary
        assert summary.title == "Dune"
        assert summary.link_url == "https://www.goodreads.com/book/show/1.Dune"
        assert summary.accent_color is not None
        assert [f.label for f in summary.fields] == ["Rating"]


class TestImageCommand:
    """Test the image command."""

    @pytest.mark.asyncio
    async def test_not_configured(self, unconfigured_config, make_transport):
        """Missing credentials should reply before any request."""
        transport = make_transport(lambda request: httpx.Response(200, json={}))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(unconfigured_config, client).image("capybara")

        assert reply.content == IMAGE_NOT_CONFIGURED
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_link(self, default_config, make_transport):
        """Should reply with the first image link as plain content."""
        payload = {"items": [{"link": "https://upload.example/capybara.jpg"}]}
        transport = make_transport(lambda request: httpx.Response(200, json=payload))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).image("capybara")

        assert reply.content == "https://upload.example/capybara.jpg"
        assert not reply.ephemeral

    @pytest.mark.asyncio
    async def test_no_image(self, default_config, make_transport):
        """No items should reply with the no image message."""
        transport = make_transport(lambda request: httpx.Response(200, json={"items": []}))
        async with httpx.AsyncClient(transport=transport) as client:
            reply = await CommandHandler(default_config, client).image("capybara")

        assert reply.content == NO_IMAGE


class TestReply:
    """Test reply payload rendering."""

    def test_error_payload(self):
        """Error replies should carry only content."""
        assert Reply.error("No results found").to_payload() == {
            "content": "No results found",
            "ephemeral": True,
        }
