"""Tests for the source fetcher."""

import io
from dataclasses import replace

import pytest


requests = pytest.importorskip("requests")

from PIL import Image

from eink_convert.config import SETTINGS
from eink_convert.infrastructure.network import SourceFetcher, decode_image


def _png_bytes(size=(4, 3), color=(10, 200, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, "PNG")
    return buffer.getvalue()


class FakeResponse:
    def __init__(self, content: bytes) -> None:
        self.content = content

    def raise_for_status(self) -> None:
        return None


class FlakySession:
    def __init__(self, failures: int, content: bytes) -> None:
        self.headers = {}
        self.failures = failures
        self.content = content
        self.calls = []

    def get(self, url, timeout):
        self.calls.append((url, timeout))
        if len(self.calls) <= self.failures:
            raise requests.ConnectionError("connection refused")
        return FakeResponse(self.content)


def _fetcher(session, retries=2):
    settings = replace(SETTINGS, retries=retries, timeout=3.0, source_url="http://frame.local/photo.jpg")
    return SourceFetcher(session_factory=lambda: session, settings=settings, sleep=lambda _: None)


def test_fetch_retries_until_success():
    session = FlakySession(failures=2, content=_png_bytes())

    img = _fetcher(session).fetch_source()

    assert img.size == (4, 3)
    assert len(session.calls) == 3
    assert session.calls[0] == ("http://frame.local/photo.jpg", 3.0)
    assert session.headers["User-Agent"].startswith("eink-convert/")


def test_fetch_uses_override_url():
    session = FlakySession(failures=0, content=_png_bytes())

    _fetcher(session).fetch_source("http://other.local/a.png")

    assert session.calls[0][0] == "http://other.local/a.png"


def test_fetch_gives_up_after_retries():
    session = FlakySession(failures=10, content=b"")

    with pytest.raises(RuntimeError):
        _fetcher(session, retries=1).fetch_bytes()

    assert len(session.calls) == 2


def test_non_image_body_is_reported_as_source_error():
    session = FlakySession(failures=0, content=b"<html>502 Bad Gateway</html>")

    with pytest.raises(RuntimeError, match="Could not decode"):
        _fetcher(session).fetch_source()

    assert len(session.calls) == 1


def test_decode_image_reads_png_bytes():
    img = decode_image(_png_bytes((2, 5)))

    assert img.size == (2, 5)
    assert img.convert("RGB").getpixel((0, 0)) == (10, 200, 30)
