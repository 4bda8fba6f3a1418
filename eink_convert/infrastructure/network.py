from __future__ import annotations

import io
import logging
import time
from typing import Callable, Optional

import requests
from PIL import Image

from ..config import SETTINGS, ConverterSettings

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def decode_image(data: bytes) -> Image.Image:
    """Decode compressed image bytes; EXIF data stays attached for orientation."""
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


class SourceFetcher:
    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        settings: ConverterSettings = SETTINGS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session_factory = session_factory or requests.Session
        self._settings = settings
        self._sleep = sleep
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "eink-convert/1.0"})
        return session

    def fetch_bytes(self, source_url: Optional[str] = None) -> bytes:
        target_url = source_url or self._settings.source_url
        last_exception: Exception | None = None
        for attempt in range(1, self._settings.retries + 2):
            try:
                response = self._session.get(target_url, timeout=self._settings.timeout)
                response.raise_for_status()
                return response.content
            except requests.RequestException as exc:
                logger.warning("Fetching %s failed (attempt %d): %s", target_url, attempt, exc)
                last_exception = exc
                self._sleep(0.4 * attempt)
        raise RuntimeError(f"Could not fetch {target_url}: {last_exception}")

    def fetch_source(self, source_url: Optional[str] = None) -> Image.Image:
        data = self.fetch_bytes(source_url)
        try:
            return decode_image(data)
        except OSError as exc:
            # UnidentifiedImageError and truncated files are both OSErrors.
            target_url = source_url or self._settings.source_url
            logger.warning("Source %s did not return an image: %s", target_url, exc)
            raise RuntimeError(f"Could not decode {target_url}: {exc}") from exc


FETCHER = SourceFetcher()
