"""Infrastructure helpers for fetching sources, caching and responses."""

from .cache import CACHE, ResponseCache, last_good, remember_last_good
from .network import FETCHER, SourceFetcher, decode_image
from .responses import MIMETYPES, render, send_bytes, send_image

__all__ = [
    "CACHE",
    "ResponseCache",
    "last_good",
    "remember_last_good",
    "FETCHER",
    "SourceFetcher",
    "decode_image",
    "MIMETYPES",
    "render",
    "send_bytes",
    "send_image",
]
