"""Unit tests for accent color extraction."""

import asyncio
import io
import time
from unittest.mock import patch

import httpx
import pytest
from PIL import Image

from kinobot.core.color import extract_accent_color, fetch_accent_color, resolve_accent_color
from kinobot.exceptions import DecodeError, FetchError, NoPaletteError


def _close(actual, expected, tolerance=3):
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


class TestExtractAccentColor:
    """Test palette quantization over image bytes."""

    def test_solid_color(self, image_bytes):
        """A single-color image should yield that color."""
        color = extract_accent_color(image_bytes(color=(200, 30, 30, 255)))

        assert _close(color, (200, 30, 30))

    def test_dominant_color_wins(self):
        """The color covering most pixels should come first."""
        image = Image.new("RGB", (40, 40), (20, 60, 200))
        image.paste((30, 180, 40), (0, 0, 10, 40))  # A quarter green
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")

        color = extract_accent_color(buffer.getvalue())

        assert _close(color, (20, 60, 200))

    def test_jpeg_supported(self, image_bytes):
        """JPEG input should decode as well as PNG."""
        color = extract_accent_color(image_bytes(color=(40, 120, 60, 255), fmt="JPEG"))

        assert _close(color, (40, 120, 60), tolerance=6)

    def test_deterministic(self, image_bytes):
        """Identical bytes should give identical colors."""
        data = image_bytes(color=(90, 90, 10, 255), size=(33, 17))

        assert extract_accent_color(data) == extract_accent_color(data)

    def test_transparent_image_has_no_palette(self, image_bytes):
        """A fully transparent image should raise NoPaletteError."""
        with pytest.raises(NoPaletteError):
            extract_accent_color(image_bytes(color=(200, 30, 30, 0)))

    def test_white_image_has_no_palette(self, image_bytes):
        """A pure white image should raise NoPaletteError."""
        with pytest.raises(NoPaletteError):
            extract_accent_color(image_bytes(color=(255, 255, 255, 255)))

    def test_garbage_bytes(self):
        """Non-image bytes should raise DecodeError."""
        with pytest.raises(DecodeError):
            extract_accent_color(b"definitely not an image")

    def test_truncated_image(self):
        """A truncated PNG should raise DecodeError."""
        buffer = io.BytesIO()
        Image.linear_gradient("L").convert("RGB").save(buffer, format="PNG")
        data = buffer.getvalue()

        with pytest.raises(DecodeError):
            extract_accent_color(data[: len(data) // 2])


class TestFetchAccentColor:
    """Test downloading and resolving accent colors."""

    @pytest.mark.asyncio
    async def test_fetch_success(self, make_transport, image_bytes):
        """Should download the image and extract its color."""
        transport = make_transport(
            lambda request: httpx.Response(200, content=image_bytes(color=(0, 0, 128, 255)))
        )
        async with httpx.AsyncClient(transport=transport) as client:
            color = await fetch_accent_color(client, "https://img.example/poster.png")

        assert _close(color, (0, 0, 128))
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_fetch_http_error(self, make_transport):
        """A failed download should raise FetchError."""
        transport = make_transport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(FetchError):
                await fetch_accent_color(client, "https://img.example/missing.png")

    @pytest.mark.asyncio
    async def test_fetch_transport_error(self, make_transport):
        """A connection failure should raise FetchError."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(FetchError):
                await fetch_accent_color(client, "https://img.example/poster.png")

    @pytest.mark.asyncio
    async def test_resolve_without_url(self, make_transport):
        """No URL should mean no color and no request."""
        transport = make_transport(lambda request: httpx.Response(200))
        async with httpx.AsyncClient(transport=transport) as client:
            assert await resolve_accent_color(client, None) is None

        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_resolve_swallows_failures(self, make_transport):
        """Undecodable images should resolve to None."""
        transport = make_transport(lambda request: httpx.Response(200, content=b"<html></html>"))
        async with httpx.AsyncClient(transport=transport) as client:
            assert await resolve_accent_color(client, "https://img.example/x.png") is None


class TestEventLoopResponsiveness:
    """Test that color extraction does not block other coroutines."""

    @staticmethod
    async def _longest_stall(work) -> tuple[float, object]:
        """Run ``work`` next to a 10 ms ticker and report the longest gap between ticks."""
        stalls = []
        done = asyncio.Event()

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.perf_counter()
                stalls.append(now - last)
                last = now

        ticker_task = asyncio.create_task(ticker())
        try:
            result = await work
        finally:
            done.set()
            await ticker_task
        return max(stalls, default=0.0), result

    @pytest.mark.asyncio
    async def test_slow_extraction_runs_off_loop(self, make_transport, image_bytes):
        """A slow decode should not stall a concurrently running ticker."""

        def slow_extract(data):
            time.sleep(0.5)
            return (1, 2, 3)

        transport = make_transport(lambda request: httpx.Response(200, content=image_bytes()))
        async with httpx.AsyncClient(transport=transport) as client:
            with patch("kinobot.core.color.extract_accent_color", side_effect=slow_extract):
                stall, color = await self._longest_stall(
                    fetch_accent_color(client, "https://image.tmdb.org/t/p/original/big.jpg")
                )

        assert color == (1, 2, 3)
        assert stall < 0.2

    @pytest.mark.asyncio
    async def test_large_poster(self, make_transport):
        """A full-size poster should resolve to its dominant non-white color."""
        poster = Image.new("RGB", (2000, 3000), (120, 20, 40))
        poster.paste((250, 250, 250), (0, 0, 2000, 500))
        buffer = io.BytesIO()
        poster.save(buffer, format="JPEG")
        data = buffer.getvalue()

        transport = make_transport(lambda request: httpx.Response(200, content=data))
        async with httpx.AsyncClient(transport=transport) as client:
            color = await resolve_accent_color(
                client, "https://image.tmdb.org/t/p/original/big.jpg"
            )

        assert _close(color, (120, 20, 40), tolerance=10)
